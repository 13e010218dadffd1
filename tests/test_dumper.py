import io
import logging

import pytest
from pydantic import ValidationError

from partialdump.config import DumpOptions
from partialdump.dumper import LazyPartial, PartialDumpUsageError, dump_partial, dumpp, print_partial


def test_dump_partial_defaults() -> None:
    assert dump_partial([1, "some long string", 3, 4, 5, 6, 7]) == "[1, 'some long string', 3, 4, 5, ...]"
    assert dump_partial("a" * 100) == "'" + "a" * 29 + "...'"


def test_single_mapping_argument_is_data_not_options() -> None:
    assert dump_partial({"max_keys": 1, "b": 2}) == "{'max_keys': 1, 'b': 2}"


def test_trailing_mapping_is_options_for_several_values() -> None:
    assert dump_partial([1] * 7, "x", {"max_elems": 2}) == "([1, 1, ...], 'x')"


def test_trailing_dump_options_instance() -> None:
    assert dump_partial("a" * 40, "b", DumpOptions(max_len=5)) == "('aa...', 'b')"


def test_keyword_options_override_trailing_mapping() -> None:
    assert dump_partial([1, 2, 3], "x", {"max_elems": 1}, max_elems=2) == "([1, 2, ...], 'x')"


def test_keyword_precious_keys_replace_those_of_trailing_options() -> None:
    data = {key: index for index, key in enumerate("abcdefg")}
    options = DumpOptions(max_keys=2, precious_keys=["a", "b", "c"])
    assert dump_partial(data, "x", options, precious_keys=["g"]) == "({'a': 0, 'g': 6, ...}, 'x')"


def test_keyword_options_with_single_value() -> None:
    data = {key: index for index, key in enumerate("abcdefg")}
    assert dump_partial(data, max_keys=4) == "{'a': 0, 'b': 1, 'c': 2, 'd': 3, ...}"


def test_several_values_without_options_is_usage_error() -> None:
    with pytest.raises(PartialDumpUsageError):
        dump_partial(1, 2)


def test_no_values_is_usage_error() -> None:
    with pytest.raises(PartialDumpUsageError):
        dump_partial()


def test_usage_error_is_type_error() -> None:
    assert issubclass(PartialDumpUsageError, TypeError)


def test_unknown_option_is_rejected() -> None:
    with pytest.raises(ValidationError):
        dump_partial(1, max_kyes=3)


def test_total_length_never_exceeds_cap() -> None:
    data = {"k%d" % index: ["v" * 50] * 10 for index in range(10)}
    for cap in (4, 10, 33, 80):
        out = dump_partial(data, max_total_len=cap)
        assert len(out) <= cap
        assert out.endswith("...")


def test_dumpp_is_alias() -> None:
    assert dumpp is dump_partial


def test_print_partial_writes_to_stderr_by_default(capsys) -> None:
    out = print_partial([1, 2, 3, 4, 5, 6])
    captured = capsys.readouterr()
    assert out == "[1, 2, 3, 4, 5, ...]"
    assert captured.err == out + "\n"
    assert captured.out == ""


def test_print_partial_to_custom_stream() -> None:
    stream = io.StringIO()
    print_partial("abc", file=stream)
    assert stream.getvalue() == "'abc'\n"


def test_lazy_partial_renders_on_str() -> None:
    assert str(LazyPartial(list(range(9)), max_elems=2)) == "[0, 1, ...]"


def test_lazy_partial_is_not_rendered_for_disabled_log_level() -> None:
    calls: list[object] = []

    def dd_filter(ctx, value):
        calls.append(value)
        return None

    logger = logging.getLogger("partialdump.tests.lazy")
    logger.setLevel(logging.WARNING)
    logger.debug("payload %s", LazyPartial([1, 2], dd_filter=dd_filter))
    assert calls == []


def test_lazy_partial_checks_arguments_eagerly() -> None:
    with pytest.raises(PartialDumpUsageError):
        LazyPartial(1, 2)
