import pytest

from smartscan.vcf import (
    AddressParts,
    clean_component,
    clean_postal_code,
    decompose_address,
    take_postal_code,
    take_region,
)


def test_full_indian_address():
    parts = decompose_address("12 MG Road, Pune, Maharashtra, 411001, India")

    assert parts == AddressParts(
        street="12 MG Road",
        city="Pune",
        state="Maharashtra",
        postal_code="411001",
        country="India",
    )
    assert parts.combined == "12 MG Road, Pune, Maharashtra, 411001, India"


def test_postal_code_cut_from_city_segment():
    parts = decompose_address("Main Bazar, Bhilwara - 311001, Rajasthan")

    assert parts.postal_code == "311001"
    assert parts.state == "Rajasthan"
    assert parts.city == "Bhilwara"
    assert parts.street == "Main Bazar"


def test_zip_with_extension_and_country():
    parts = decompose_address("500 Main Street, Springfield, IL, 62701-1234, USA")

    assert parts.postal_code == "62701-1234"
    assert parts.country == "USA"
    assert parts.state == "IL"
    assert parts.city == "Springfield"
    assert parts.street == "500 Main Street"


def test_multiline_address_is_positional():
    parts = decompose_address("Plot 4, Sector 2\n\nJaipur\nRajasthan\n")

    assert parts.street == "Plot 4, Sector 2"
    assert parts.city == "Jaipur"
    assert parts.state == "Rajasthan"
    assert parts.postal_code == ""
    assert parts.country == ""


def test_single_segment_with_number_run_is_street():
    parts = decompose_address("Plot 123 Industrial Area")

    assert parts.street == "Plot 123 Industrial Area"
    assert parts.city == ""
    assert parts.state == ""


@pytest.mark.parametrize("address", ["Andheri East Mumbai", "Bhilwara 311001 Rajasthan"])
def test_comma_free_address_is_whole_street(address):
    parts = decompose_address(address)

    assert parts.street == address
    assert parts.city == ""
    assert parts.state == ""
    assert parts.postal_code == ""
    assert parts.country == ""


def test_city_with_locality_word_accepts_digits():
    parts = decompose_address("Shop 7, 110 Feet Road, Rajkot")

    assert parts.state == "Rajkot"
    assert parts.city == "110 Feet Road"
    assert parts.street == "Shop 7"


@pytest.mark.parametrize("address", ["", "   "])
def test_blank_address_is_empty(address):
    assert decompose_address(address).is_empty()


def test_components_are_sanitized():
    parts = decompose_address("Shop;  4\\ Main, Pune\\, 4110;01")

    for value in parts.components():
        assert ";" not in value
        assert "\\" not in value
        assert "  " not in value


def test_clean_component_and_postal_code():
    assert clean_component("A;B\\C   D ") == "A B C D"
    assert clean_postal_code("4110;01\\") == "411001"


def test_take_postal_code_only_first_match():
    segments = ["Area 411001", "Other 411002"]

    assert take_postal_code(segments) == "411001"
    assert segments == ["Area", "Other 411002"]


def test_take_region_keeps_a_segment_before_country():
    segments = ["Pune", "India"]

    assert take_region(segments) == ("", "India")
    assert segments == ["Pune"]


def test_take_region_rejects_long_or_numeric_segments():
    assert take_region(["Street", "Sector 21"]) == ("", "")
    assert take_region(["Street", "x" * 30]) == ("", "")
    assert take_region(["Street", "A"]) == ("", "")
