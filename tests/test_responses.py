import pytest

from atat.responses import echo, prompt_response, success_response, urc_helper
from atat.results import DigestResult
from atat.scan import Incomplete, NoMatch


def _strip_optional_echo(buf):
    try:
        _, rest = echo(buf)
    except NoMatch:
        return buf
    return rest


@pytest.mark.parametrize(
    "response, expected",
    [
        (b"\r\n", b"\r\n"),
        (b"\r", b"\r"),
        (b"\n", b"\n"),
        (
            b"this is a string that ends just with <CR>\r",
            b"this is a string that ends just with <CR>\r",
        ),
        (
            b"this is a string that ends just with <CR>\n",
            b"this is a string that ends just with <CR>\n",
        ),
        (b"\r\nthis is valid", b"\r\nthis is valid"),
        (b"a\r\nthis is valid", b"\r\nthis is valid"),
        (b"a\r\n", b"\r\n"),
        (b"all this string is to be considered echo\r\n", b"\r\n"),
        (
            b"all this string is to be considered echo\r\nthis is valid",
            b"\r\nthis is valid",
        ),
        (
            b"echo echo\r\nthis is valid\r\nand so is this",
            b"\r\nthis is valid\r\nand so is this",
        ),
        (
            b"\r\nthis is valid\r\nand so is this",
            b"\r\nthis is valid\r\nand so is this",
        ),
        (
            b"\r\nthis is valid\r\nand so is this\r\n",
            b"\r\nthis is valid\r\nand so is this\r\n",
        ),
    ],
)
def test_echo_removal(response, expected):
    assert _strip_optional_echo(response) == expected


@pytest.mark.parametrize(
    "buf, rest, echo_len",
    [
        (b"AT\r\n", b"\r\n", 2),
        (b"AT+GMR\r\r\n", b"\r\n", 7),
        (b"AT\r\r\n\r\n", b"\r\n\r\n", 3),
        (b"AT+USORD=3,16\r\n", b"\r\n", 13),
        (b"AT+CMUX=?\r\n", b"\r\n", 9),
        (b"AT+CMUX?\r\n", b"\r\n", 8),
        (b"AT+CMUX?\r\nAT", b"\r\nAT", 8),
    ],
)
def test_echo(buf, rest, echo_len):
    echoed, remaining = echo(buf)
    assert remaining == rest
    assert len(echoed) == echo_len
    assert echoed + remaining == buf


def test_echo_short_buffer_is_empty():
    assert echo(b"A") == (b"", b"A")


def test_echo_without_line_ending():
    with pytest.raises(NoMatch):
        echo(b"AT+CMUX?")


def test_urc_with_parameters():
    parse = urc_helper(b"+CIEV")
    buf = b"\r\n+CIEV: 7,1\r\n\r\n+CRING: VOICE\r\n\r\n+CLIP: \"+0123456789\",145,,,,0\r\n"
    assert parse(buf) == (b"+CIEV: 7,1", 14)


def test_urc_whole_line():
    parse = urc_helper("+UUSORD")
    assert parse(b"\r\n+UUSORD: 3,16,\"16 bytes of data\"\r\n") == (
        b"+UUSORD: 3,16,\"16 bytes of data\"",
        36,
    )


def test_urc_followed_by_command():
    parse = urc_helper(b"+UUSORD")
    buf = b"\r\n+UUSORD: 0,5\r\nAT+USORD=0,4\r\r\n+USORD: 0,4,\"90030002\"\r\nOK\r\n"
    assert parse(buf) == (b"+UUSORD: 0,5", 16)


def test_urc_with_embedded_newline():
    parse = urc_helper(b"+UUSORD")
    buf = b"\r\n+UUSORD: 0,37\n+UUSORD: 0,371\r\n"
    assert parse(buf) == (b"+UUSORD: 0,37\n+UUSORD: 0,371", len(buf))


def test_urc_bare_token():
    parse = urc_helper(b"CONNECT OK")
    assert parse(b"\r\nCONNECT OK\r\n\r\nOK\r\n") == (b"CONNECT OK", 14)


@pytest.mark.parametrize(
    "buf",
    [b"\r\n+UU", b"\r\n+UUSORD", b"\r\n+UUSORD\r"],
)
def test_urc_incomplete(buf):
    with pytest.raises(Incomplete):
        urc_helper(b"+UUSORD")(buf)


@pytest.mark.parametrize(
    "buf",
    [
        b"",
        b"+UUSORD: 1\r\n",
        b"\r\n+CIEV: 1\r\n",
        b"\r\n+UUSORD: 1",
        b"\r\n+UUSORDX\r\n",
    ],
)
def test_urc_no_match(buf):
    with pytest.raises(NoMatch):
        urc_helper(b"+UUSORD")(buf)


def test_data_ready_prompt():
    assert prompt_response(b"AT+USECMNG=0,0,\"Verisign\",1758\r>") == (
        DigestResult.prompt(b">"),
        32,
    )


def test_ready_for_data_prompt():
    assert prompt_response(b"AT+USOWR=3,16\r@") == (DigestResult.prompt(ord("@")), 15)


def test_prompt_with_trailing_space():
    buf = b"\r\n+CIPRXGET: 2,0,2,0\r\n> "
    assert prompt_response(buf) == (DigestResult.prompt(b">"), len(buf))


def test_prompt_not_at_end():
    with pytest.raises(NoMatch):
        prompt_response(b"\r\n> more data\r\n")


def test_prompt_absent():
    with pytest.raises(NoMatch):
        prompt_response(b"\r\nOK\r\n")


@pytest.mark.parametrize(
    "buf",
    [
        b"\r\nOK\r\n",
        b"\r\nOK\r\n\r\n+CMTI: \"ME\",1\r\n",
        b"\r\nOK\r\n\r\n+CIEV: 7,1\r\n\r\n+CRING: VOICE\r\n",
    ],
)
def test_plain_ok(buf):
    assert success_response(buf) == (DigestResult.response(b""), 6)


def test_ok_with_data():
    assert success_response(b"\r\n123456789\r\nOK\r\n") == (
        DigestResult.response(b"123456789"),
        17,
    )


def test_ok_after_parameter_line():
    buf = b"\r\n+CPIN: READY\r\n\r\nOK\r\n"
    assert success_response(buf) == (DigestResult.response(b"+CPIN: READY"), len(buf))


def test_multi_line_response():
    buf = (
        b"\r\nAT version:1.1.0.0(May 11 2016 18:09:56)\r\nSDK version:1.5.4(baaeaebb)"
        b"\r\ncompile time:May 20 2016 15:08:19\r\nOK\r\n"
    )
    expectation = (
        b"AT version:1.1.0.0(May 11 2016 18:09:56)\r\nSDK version:1.5.4(baaeaebb)"
        b"\r\ncompile time:May 20 2016 15:08:19"
    )
    result, consumed = success_response(buf)
    assert result == DigestResult.response(expectation)
    assert consumed == len(buf)


def test_connect_line():
    buf = b"\r\nCONNECT 9600\r\nrest"
    assert success_response(buf) == (DigestResult.response(b""), len(buf) - 4)


def test_connect_with_preceding_data():
    buf = b"\r\nfoo\r\nCONNECT\r\n"
    assert success_response(buf) == (DigestResult.response(b"foo"), len(buf))


def test_connect_without_line_end():
    with pytest.raises(NoMatch):
        success_response(b"\r\nCONNECT 9600")


def test_unknown_is_not_success():
    with pytest.raises(NoMatch):
        success_response(b"\r\nUNKNOWN COMMAND\r\n")