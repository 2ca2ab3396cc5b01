from carhire.utils.security import check_hash, generate_hash, same_secret


def test_password_hash_roundtrip():
    pw = "Secret123"
    h = generate_hash(pw)
    assert check_hash(pw, h)
    assert not check_hash("wrong", h)
    assert not check_hash(pw, "")


def test_same_secret():
    assert same_secret("admin@a6cars.com", "admin@a6cars.com")
    assert not same_secret("admin@a6cars.com", "admin@a6cars.co")
