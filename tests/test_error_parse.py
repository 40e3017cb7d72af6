import pytest

from atat.error_parse import error_response
from atat.errors import CmeReport, CmsError, ConnectionErrorKind, ErrorKind, InternalError
from atat.results import DigestResult
from atat.scan import Incomplete, NoMatch


def _err(kind, detail=None):
    return DigestResult.error(InternalError(kind, detail))


def _cme(**fields):
    return _err(ErrorKind.CME_ERROR, CmeReport(**fields))


def _conn(kind):
    return _err(ErrorKind.CONNECTION_ERROR, kind)


@pytest.mark.parametrize(
    "buf, expected, consumed",
    [
        (b"\r\nERROR\r\n", _err(ErrorKind.ERROR), 9),
        (b"\r\nERROR\r\n\r\noooops\r\n", _err(ErrorKind.ERROR), 9),
        (b"\r\n+CME ERROR: raspberry\r\n", _cme(message=b"raspberry"), 25),
        (b"\r\n+CME ERROR: 112\r\n", _cme(code=112), 19),
        (b"\r\n+CME ERROR: \r\n", _cme(), 16),
        (b"\r\n+CMS ERROR: bananas\r\n", _err(ErrorKind.CMS_ERROR, CmsError.UNKNOWN), 23),
        (b"\r\n+CMS ERROR: 332\r\n", _err(ErrorKind.CMS_ERROR, CmsError.NETWORK_TIMEOUT), 19),
        (b"\r\n+CMS ERROR: \r\n", _err(ErrorKind.CMS_ERROR, CmsError.UNKNOWN), 16),
        (b"\r\nMODEM ERROR: 5\r\n", _cme(), 18),
        (b"\r\nCOMMAND NOT SUPPORT\r\n", _err(ErrorKind.ERROR), 23),
        (b"\r\nCOMMAND NOT SUPPORT\r\n\r\nSomething extra\r\n", _err(ErrorKind.ERROR), 23),
        (b"\r\nNO CARRIER\r\n", _conn(ConnectionErrorKind.NO_CARRIER), 14),
        (b"\r\nNO CARRIER\r\n\r\nSomething extra\r\n", _conn(ConnectionErrorKind.NO_CARRIER), 14),
        (b"\r\nBUSY\r\n", _conn(ConnectionErrorKind.BUSY), 8),
        (b"\r\nBUSY\r\n\r\nSomething extra\r\n", _conn(ConnectionErrorKind.BUSY), 8),
        (b"\r\nNO ANSWER\r\n", _conn(ConnectionErrorKind.NO_ANSWER), 13),
        (b"\r\nNO ANSWER\r\n\r\nSomething extra\r\n", _conn(ConnectionErrorKind.NO_ANSWER), 13),
        (b"\r\nNO DIALTONE\r\n", _conn(ConnectionErrorKind.NO_DIALTONE), 15),
        (b"\r\nNO DIALTONE\r\n\r\nSomething extra\r\n", _conn(ConnectionErrorKind.NO_DIALTONE), 15),
    ],
)
def test_error_forms(buf, expected, consumed):
    assert error_response(buf) == (expected, consumed)


@pytest.mark.parametrize(
    "buf",
    [
        b"\r\nUNKNOWN COMMAND\r\n",
        b"\r\n+CME ERROR:\r\n",
        b"\r\n+CMS ERROR:\r\n",
        b"\r\nMODEM ERROR: apple\r\n",
        b"\r\nMODEM ERROR: \r\n",
        b"\r\nMODEM ERROR:\r\n",
    ],
)
def test_not_an_error(buf):
    with pytest.raises(NoMatch):
        error_response(buf)


def test_numeric_error_after_data():
    buf = b"\r\n+USORD: 3,16,\"16 bytes of data\"\r\n+CME ERROR: 122\r\n"
    assert error_response(buf) == (_cme(code=122), len(buf))


def test_verbose_error_after_data():
    buf = b"\r\n+USORD: 3,16,\"16 bytes of data\"\r\n+CME ERROR: Operation not allowed\r\n"
    assert error_response(buf) == (_cme(message=b"Operation not allowed"), len(buf))


def test_generic_error_after_data():
    buf = b"\r\n+USORD: 3,16,\"16 bytes of data\"\r\nERROR\r\n"
    assert error_response(buf) == (_err(ErrorKind.ERROR), 42)


def test_cpin_error():
    assert error_response(b"\r\n+CME ERROR: 10\r\n") == (_cme(code=10), 18)


def test_cms_verbose_message():
    buf = b"\r\n+CMS ERROR: SIM busy\r\n"
    assert error_response(buf) == (_err(ErrorKind.CMS_ERROR, CmsError.SIM_BUSY), len(buf))


def test_code_out_of_range_is_a_message():
    buf = b"\r\n+CME ERROR: 70000\r\n"
    assert error_response(buf) == (_cme(message=b"70000"), len(buf))


def test_not_available():
    assert error_response(b"\r\nNA\r\n") == (_cme(message=b"Operation not allowed"), 6)


@pytest.mark.parametrize("buf", [b"\r\n+CME ERROR:", b"\r\nNA"])
def test_incomplete(buf):
    with pytest.raises(Incomplete):
        error_response(buf)


def test_success_is_not_an_error():
    with pytest.raises(NoMatch):
        error_response(b"\r\nOK\r\n")