import pytest

from latencytest.config import BindAddress, parse_args


def test_default_bind_listens_everywhere():
    args = parse_args([])
    assert args.bind == BindAddress("0.0.0.0", 8080)


def test_bind_forms():
    assert parse_args(["-bind", "127.0.0.1:9000"]).bind == BindAddress("127.0.0.1", 9000)
    assert parse_args(["-bind", ":0"]).bind == BindAddress("0.0.0.0", 0)
    assert parse_args(["-bind", "[::1]:8081"]).bind == BindAddress("::1", 8081)


@pytest.mark.parametrize("value", ["8080", "host:http", ":70000", "::1:80"])
def test_bad_bind_is_a_usage_error(value):
    with pytest.raises(SystemExit) as exc:
        parse_args(["-bind", value])
    assert exc.value.code == 2
