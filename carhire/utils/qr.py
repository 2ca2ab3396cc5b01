"""QR rendering for payment instructions."""
from qrcodegen import QrCode


def render_qr_svg(payload: str, size: int = 320, border: int = 2) -> str:
    """Render ``payload`` as a standalone SVG QR code (medium error correction)."""
    qr = QrCode.encode_text(payload, QrCode.Ecc.MEDIUM)
    qr_size = qr.get_size()
    scale = max(1, size // (qr_size + border * 2))
    canvas = (qr_size + border * 2) * scale
    rects = []
    for y in range(qr_size):
        for x in range(qr_size):
            if qr.get_module(x, y):
                rects.append(
                    f'<rect x="{(x + border) * scale}" y="{(y + border) * scale}" '
                    f'width="{scale}" height="{scale}"/>'
                )
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {canvas} {canvas}" '
        f'width="{size}" height="{size}" role="img" aria-label="UPI payment QR">'
        '<rect width="100%" height="100%" fill="#fff"/>'
        '<g fill="#000">'
        + "".join(rects)
        + "</g></svg>"
    )
