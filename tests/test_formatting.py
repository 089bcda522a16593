from datetime import datetime

from storefront.commerce.models import Cart
from storefront.utils.formatting import currency, date, escape


def test_escape_html():
    assert escape('<b>"Tom" & Jerry</b>') == "&lt;b&gt;&quot;Tom&quot; &amp; Jerry&lt;/b&gt;"
    assert escape(None) == ""
    assert escape(42) == "42"


def test_currency_resolves_dotted_path():
    order = {"grand_total": 1234.5, "shipping": {"price": "7"}}

    assert currency(order, "grand_total") == "$1,234.50"
    assert currency(order, "shipping.price") == "$7.00"


def test_currency_unresolved_path_is_zero():
    assert currency({"shipping": None}, "shipping.price") == "$0.00"
    assert currency({}, "grand_total") == "$0.00"


def test_currency_reads_typed_records():
    cart = Cart.model_validate({"id": "c1", "sub_total": 19.99, "shipping": {"price": 5}})

    assert currency(cart, "sub_total") == "$19.99"
    assert currency(cart, "shipping.price") == "$5.00"


def test_date_formats_iso_strings_and_datetimes():
    assert date("2024-03-05T17:45:00.000Z") == "2024-03-05"
    assert date(datetime(2023, 12, 31, 23, 59)) == "2023-12-31"


def test_date_formats_unix_timestamps():
    assert date(0) == "1970-01-01"


def test_date_unparseable_is_empty():
    assert date("not a date") == ""
    assert date(None) == ""
