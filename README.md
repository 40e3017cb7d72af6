# atat

Tools for talking to modems and other devices that speak AT commands over a
byte stream. The package uses only the standard library.

## Parts

- **Digesting** (`atat.digest.AtDigester`): looks at the bytes received so far
  and picks out command echoes, responses (`OK`, `CONNECT`, `ERROR`,
  `COMMAND NOT SUPPORT`, `+CME ERROR: ...`, `+CMS ERROR: ...`,
  `MODEM ERROR: ...`, `NO CARRIER`, `BUSY`, `NO ANSWER`, `NO DIALTONE`, `NA`),
  data prompts (`>` and `@`) and unsolicited result codes (URCs). Each call to
  `digest` returns an `atat.results.DigestResult` and the number of bytes it
  consumed. `with_custom_success`, `with_custom_error` and
  `with_custom_prompt` return a copy of the digester that tries your own
  parser before the standard ones.
- **Parsers** (`atat.responses`, `atat.error_parse`, `atat.scan`): the
  building blocks the digester uses. `urc_helper(token)` builds a URC parser
  for lines that start with `token`. A parser raises `atat.scan.Incomplete`
  when more bytes might still complete a match, and `atat.scan.NoMatch` when
  no match is possible.
- **Ingress** (`atat.ingress.Ingress`): buffers incoming bytes up to a fixed
  capacity and runs the digester over them again and again. Responses and
  prompts go to a response slot. URC lines go through your `urc_parse`
  function, and the values it returns are published to a queue-like object,
  for example `asyncio.Queue`. `try_write` raises `UrcChannelFull` when a URC
  cannot be queued right away. `write` and `read_from` wait for room instead.
- **Clients** (`atat.blocking.Client` and `atat.asynch.AsyncClient`): write a
  command, wait out the command cooldown left from the previous request, wait
  for the response until the deadline, and parse it. Failures raise
  `atat.errors.AtError`, whose `kind` is an `ErrorKind`. `send_retry` tries
  again after a timeout, up to `cmd.attempts` times. The async client also
  tries again after a parse error if `cmd.reattempt_on_parse_err` is set.
- **Configuration** (`atat.config.Config`): the command cooldown, the write
  and flush timeouts, and a hook that works out the response deadline. All
  durations are in seconds.
- **Errors** (`atat.errors`): `AtError`, `InternalError`, `ErrorKind`,
  `CmeReport`, and the enums `CmsError` and `ConnectionErrorKind`, which
  decode the codes and messages that modems report.
- **Lengths** (`atat.lengths`): the largest serialized size of command
  arguments, from `scalar_len`, `hex_str_len`, `hex_array_len`, `string_len`,
  `optional_len` and `vec_len`.

## Digesting a stream

```python
from atat.digest import AtDigester
from atat.responses import urc_helper

digester = AtDigester(urc_helper(b"+CIEV"))

result, consumed = digester.digest(b"AT+CIMI?\r\n123456789\r\nOK\r\n")
# result.value == b"123456789"; consumed == 25

result, consumed = digester.digest(b"\r\n+CIEV: 7,1\r\n")
# result.kind is DigestKind.URC, result.value == b"+CIEV: 7,1"; consumed == 14
```

Sometimes the buffer holds only part of a message. The digester then returns
an empty result and counts only the leading spaces and echo it consumed. Keep
the remaining bytes and call it again when more data comes in. `Ingress` does
this for you.

## Commands and the objects the clients expect

A command is any object that has:

- `write()`, which returns the bytes to send.
- `parse(response)`, which turns the response into a result or raises
  `AtError`. The response is the data bytes or an `InternalError`.
- The attributes `expects_response_code`, `max_timeout_ms`, `attempts` and
  `reattempt_on_parse_err`.

The blocking client needs a writer with `write(data)` and `flush()`. It also
needs a response slot with `reset()` and `try_get()`, where `try_get()`
returns `None` until a response is there. The async client needs the same
things with awaitable `write`, `flush` and `get()`.

## Configuration

```python
from atat.config import Config

config = Config().with_cmd_cooldown(0.05)
```

`with_response_timeout` takes a function of `(start, duration)` that returns
the deadline as a `time.monotonic()` value. The default is `start + duration`.
The clients call the function again while they wait. If it returns a later
deadline, the wait goes on. You can use this to extend the timeout while flow
control holds the device back.

## What the package does not do

- It has no ready-made response slot or URC channel. You supply your own
  objects with the methods listed above.
- It does not turn typed command or response structures into AT text, or back
  again. Each command writes and parses its own bytes.
- It does not open serial ports. `Ingress.read_from` reads from any object
  with an awaitable `read(n)`.

## Running the tests

```
pip install -e ".[test]"
pytest
```