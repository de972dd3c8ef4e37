"""Tests for the quote providers."""

from decimal import Decimal
from http.client import IncompleteRead
from unittest.mock import MagicMock, patch
from urllib.error import URLError

import pytest

from stock_monitor.config import ProviderConfig, QuoteSource
from stock_monitor.errors import PartialQuoteError
from stock_monitor.providers import (
    SinaQuoteProvider,
    TencentQuoteProvider,
    get_provider,
)
from stock_monitor.providers.base import to_decimal


def sina_line(symbol, name, prev_close, price, n_fields=33):
    fields = [name, "10.000", prev_close, price, "10.800", "9.900"]
    fields += ["0"] * (n_fields - len(fields))
    if n_fields > 31:
        fields[30] = "2024-01-08"
        fields[31] = "15:00:03"
    return f'var hq_str_{symbol}="{",".join(fields)}";'


def tencent_line(symbol, name, price, change, change_percent, n_fields=50):
    fields = ["1", name, symbol[2:], price] + ["0"] * (n_fields - 4)
    if n_fields > 34:
        fields[30] = "20240108150003"
        fields[31] = change
        fields[32] = change_percent
        fields[33] = "10.80"
        fields[34] = "9.90"
    return f'v_{symbol}="{"~".join(fields)}";'


def mock_response(mock_urlopen, body: bytes) -> MagicMock:
    response = MagicMock()
    response.read.return_value = body
    mock_urlopen.return_value.__enter__.return_value = response
    return response


class TestToDecimal:
    def test_number(self):
        assert to_decimal(" 10.52 ") == Decimal("10.52")

    @pytest.mark.parametrize("text", ["", "abc", "nan", "inf"])
    def test_garbage_reads_as_zero(self, text):
        assert to_decimal(text) == 0


class TestSinaParsing:
    def test_well_formed_line(self):
        quotes = SinaQuoteProvider().parse(sina_line("sh600000", "PFYH", "10.00", "10.456"))
        quote = quotes["sh600000"]
        assert quote.name == "PFYH"
        assert quote.price == Decimal("10.456")
        assert quote.change == Decimal("0.456")
        assert quote.change_percent == Decimal("4.56")
        assert quote.high == Decimal("10.800")
        assert quote.low == Decimal("9.900")
        assert quote.time == "15:00:03"

    def test_exactly_32_fields(self):
        quotes = SinaQuoteProvider().parse(sina_line("sh600000", "X", "3.00", "3.10", 32))
        assert quotes["sh600000"].change_percent == Decimal("3.33")

    def test_change_percent_rounds_half_up(self):
        quotes = SinaQuoteProvider().parse(sina_line("sh600000", "X", "8", "8.0004"))
        assert quotes["sh600000"].change_percent == Decimal("0.01")

    def test_change_percent_two_places(self):
        quotes = SinaQuoteProvider().parse(sina_line("sz000001", "X", "7", "6.3"))
        assert quotes["sz000001"].change_percent == Decimal("-10.00")
        assert quotes["sz000001"].change_percent.as_tuple().exponent == -2

    def test_zero_previous_close(self):
        quotes = SinaQuoteProvider().parse(sina_line("sh600000", "X", "0", "5"))
        assert quotes["sh600000"].change_percent == 0
        assert quotes["sh600000"].change == Decimal("5")

    def test_too_few_fields(self):
        assert SinaQuoteProvider().parse(sina_line("sh600000", "X", "10", "11", 31)) == {}

    def test_empty_name(self):
        assert SinaQuoteProvider().parse(sina_line("sh600000", "", "10", "11")) == {}

    def test_unknown_symbol_reply(self):
        assert SinaQuoteProvider().parse('var hq_str_sh999999="";') == {}

    def test_other_lines_ignored(self):
        text = "\n".join(
            [
                "garbage",
                sina_line("sh600000", "A", "10", "11"),
                "",
                sina_line("sz000001", "B", "10", "9"),
            ]
        )
        assert set(SinaQuoteProvider().parse(text)) == {"sh600000", "sz000001"}

    def test_parse_record_raises_on_short_record(self):
        with pytest.raises(PartialQuoteError, match="expected 32"):
            SinaQuoteProvider().parse_record("sh600000", "a,b,c")


class TestTencentParsing:
    def test_well_formed_line(self):
        quotes = TencentQuoteProvider().parse(
            tencent_line("sh600000", "浦发银行", "10.45", "0.45", "4.50")
        )
        quote = quotes["sh600000"]
        assert quote.name == "浦发银行"
        assert quote.price == Decimal("10.45")
        assert quote.change == Decimal("0.45")
        assert quote.change_percent == Decimal("4.50")
        assert quote.high == Decimal("10.80")
        assert quote.low == Decimal("9.90")
        assert quote.time == "20240108150003"

    def test_too_few_fields(self):
        line = tencent_line("sh600000", "X", "10", "0", "0", n_fields=34)
        assert TencentQuoteProvider().parse(line) == {}

    def test_exactly_35_fields(self):
        line = tencent_line("sh600000", "X", "10", "-0.10", "-0.99", n_fields=35)
        assert TencentQuoteProvider().parse(line)["sh600000"].change_percent == Decimal("-0.99")

    def test_empty_name(self):
        assert TencentQuoteProvider().parse(tencent_line("sh600000", "", "10", "0", "0")) == {}


class TestFetch:
    @patch("stock_monitor.providers.base.urlopen")
    def test_sina_request(self, mock_urlopen):
        body = "\n".join(
            [sina_line("sh600000", "A", "10", "11"), sina_line("sz000001", "B", "10", "9")]
        ).encode("gbk")
        mock_response(mock_urlopen, body)

        quotes = SinaQuoteProvider().fetch(["sh600000", "sz000001", "sh600000"])

        req = mock_urlopen.call_args.args[0]
        assert req.full_url == "http://hq.sinajs.cn/list=sh600000,sz000001"
        assert req.get_header("Referer") == "https://finance.sina.com.cn"
        assert mock_urlopen.call_args.kwargs["timeout"] == ProviderConfig().REQUEST_TIMEOUT_S
        assert set(quotes) == {"sh600000", "sz000001"}

    @patch("stock_monitor.providers.base.urlopen")
    def test_tencent_transcodes_gbk(self, mock_urlopen):
        body = tencent_line("sh600000", "浦发银行", "10.45", "0.45", "4.50").encode("gbk")
        mock_response(mock_urlopen, body)

        quotes = TencentQuoteProvider().fetch(["sh600000"])

        req = mock_urlopen.call_args.args[0]
        assert req.full_url == "http://qt.gtimg.cn/q=sh600000"
        assert quotes["sh600000"].name == "浦发银行"

    @patch("stock_monitor.providers.base.urlopen")
    def test_missing_symbol_is_absent(self, mock_urlopen):
        mock_response(mock_urlopen, sina_line("sh600000", "A", "10", "11").encode())
        quotes = SinaQuoteProvider().fetch(["sh600000", "sz000001"])
        assert "sz000001" not in quotes
        assert "sh600000" in quotes

    @pytest.mark.parametrize("error", [URLError("down"), TimeoutError(), IncompleteRead(b"")])
    @patch("stock_monitor.providers.base.urlopen")
    def test_transport_failure_returns_empty(self, mock_urlopen, error):
        mock_urlopen.side_effect = error
        assert SinaQuoteProvider().fetch(["sh600000"]) == {}

    @patch("stock_monitor.providers.base.urlopen")
    def test_non_ascii_symbol_returns_empty(self, mock_urlopen):
        mock_urlopen.side_effect = UnicodeEncodeError(
            "ascii", "/list=平安银行", 6, 10, "ordinal not in range(128)"
        )
        assert SinaQuoteProvider().fetch(["平安银行"]) == {}

    @patch("stock_monitor.providers.base.urlopen")
    def test_no_codes_skips_request(self, mock_urlopen):
        assert TencentQuoteProvider().fetch([]) == {}
        mock_urlopen.assert_not_called()


class TestGetProvider:
    def test_by_enum(self):
        assert isinstance(get_provider(QuoteSource.SINA), SinaQuoteProvider)

    @pytest.mark.parametrize("name", ["tencent", "TENCENT"])
    def test_by_name(self, name):
        assert isinstance(get_provider(name), TencentQuoteProvider)

    def test_custom_config(self):
        config = ProviderConfig(REQUEST_TIMEOUT_S=3)
        assert get_provider("sina", config).config.REQUEST_TIMEOUT_S == 3

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown quote source"):
            get_provider("yahoo")
