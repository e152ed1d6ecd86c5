# tests/test_validation.py
import pytest

from marqueza_sdk.validation import (
    ImageFile,
    capitalize_words,
    format_phone,
    parse_integer,
    parse_number,
    validate_address,
    validate_details,
    validate_full_name,
    validate_image,
    validate_phone,
    validate_price,
    validate_product_data,
    validate_profile_data,
    validate_profile_picture,
    validate_stock,
)

PNG = ImageFile("a.png", "image/png", b"\x89PNG" + b"0" * 16)


def _valid_product(**overrides):
    data = {
        "name": "Lavender bouquet",
        "description": "Hand-tied bouquet of dried lavender",
        "price": "19.99",
        "stock": "5",
        "categoryId": "c1",
        "isPersonalizable": False,
        "details": "",
        "image": PNG,
    }
    data.update(overrides)
    return data


def test_valid_product_has_no_errors():
    report = validate_product_data(_valid_product())
    assert report.is_valid
    assert report.errors == {}


def test_invalid_product_reports_every_field():
    report = validate_product_data(
        {"name": "A", "description": "short", "price": "0", "stock": "-1", "categoryId": "", "image": None}
    )
    assert not report.is_valid
    assert set(report.errors) == {"name", "description", "price", "stock", "categoryId", "image"}
    assert report.errors["price"] == "Price must be greater than 0"
    assert report.errors["stock"] == "Stock cannot be negative"


def test_image_not_required_when_editing():
    report = validate_product_data(_valid_product(image=None), editing_id="p1")
    assert report.is_valid


@pytest.mark.parametrize("value,ok", [
    ("0.01", True),
    ("999999.99", True),
    ("1000000", False),
    ("0", False),
    ("-5", False),
    ("abc", False),
    ("12abc", False),
    ("", False),
    (19.5, True),
])
def test_validate_price(value, ok):
    assert validate_price(value).is_valid is ok


@pytest.mark.parametrize("value,ok", [
    ("0", True),
    ("999999", True),
    ("1000000", False),
    ("-1", False),
    ("2.5", False),
    ("", False),
    (3, True),
])
def test_validate_stock(value, ok):
    assert validate_stock(value).is_valid is ok


def test_number_parsing_is_strict():
    assert parse_number("3.5") == 3.5
    assert parse_number(" 7 ") == 7.0
    assert parse_number("nan") is None
    assert parse_number(True) is None
    assert parse_integer("12") == 12
    assert parse_integer("12.0") is None


def test_image_size_limit_message_mentions_5mb():
    big = ImageFile("big.png", "image/png", b"0" * (6 * 1024 * 1024))
    result = validate_image(big)
    assert not result.is_valid
    assert "5MB" in result.error


def test_image_type_error_wins_over_size():
    big_pdf = ImageFile("big.pdf", "application/pdf", b"0" * (6 * 1024 * 1024))
    result = validate_image(big_pdf)
    assert result.error == "Image must be JPG, PNG, WebP or GIF"


def test_details_limit():
    assert validate_details("x" * 1000).is_valid
    assert not validate_details("x" * 1001).is_valid
    assert validate_details(None).is_valid


@pytest.mark.parametrize("raw,expected", [
    ("71234567", "7123-4567"),
    ("7123", "7123"),
    ("712", "712"),
    ("81234567", "7812-3456"),
    ("7123-4567-99", "7123-4567"),
    ("(7) 123 45", "7123-45"),
    ("", ""),
])
def test_format_phone(raw, expected):
    assert format_phone(raw) == expected


def test_format_phone_is_stable_on_formatted_input():
    once = format_phone("71234567")
    assert format_phone(once) == once


def test_validate_phone():
    assert validate_phone("7123-4567").is_valid
    result = validate_phone("8123-4567")
    assert result.error == "Format: 7XXX-XXXX (e.g. 7123-4567)"
    assert validate_phone("").error == "Phone is required"


def test_full_name_rules():
    assert validate_full_name("José Núñez").is_valid
    assert validate_full_name("Anne-Marie O'Neil").is_valid
    assert not validate_full_name("R2D2").is_valid
    assert not validate_full_name("J").is_valid


def test_address_length():
    assert not validate_address("Short").is_valid
    assert validate_address("Colonia Escalon, San Salvador").is_valid
    assert not validate_address("x" * 201).is_valid


def test_profile_picture_rules():
    assert validate_profile_picture(PNG).is_valid
    gif = ImageFile("a.gif", "image/gif", b"GIF89a")
    assert not validate_profile_picture(gif).is_valid
    big = ImageFile("big.jpg", "image/jpeg", b"0" * (5 * 1024 * 1024 + 1))
    assert validate_profile_picture(big).error == "Image cannot exceed 5MB"


def test_profile_data_report():
    report = validate_profile_data({"fullName": "Ana", "phone": "123", "address": ""})
    assert set(report.errors) == {"phone", "address"}


def test_capitalize_words():
    assert capitalize_words("ana lucía pérez") == "Ana Lucía Pérez"
    assert capitalize_words("") == ""


def test_image_file_from_path(tmp_path):
    path = tmp_path / "photo.png"
    path.write_bytes(b"\x89PNG1234")
    image = ImageFile.from_path(str(path))
    assert image.filename == "photo.png"
    assert image.content_type == "image/png"
    assert image.size == 8
