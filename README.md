# lzstream

`lzstream` reads and writes LZMA data in pure Python. It uses only the
standard library.

It handles two formats:

* the classic `.lzma` file format: a 13-byte header followed by one raw LZMA
  stream, which may end with an end-of-stream marker;
* LZMA2 chunk sequences, the compressed payload carried inside `.xz` blocks.

## Installation

```
pip install lzstream
```

## Classic LZMA

To compress and decompress bytes in memory:

```python
from lzstream.writer import compress
from lzstream.reader import decompress

packed = compress(b"The quick brown fox jumps over the lazy dog.")
assert decompress(packed) == b"The quick brown fox jumps over the lazy dog."
```

To stream data through file objects, use `LzmaWriter` and `LzmaReader`.
`LzmaWriter` writes the header as soon as it is created and is a context
manager; leaving the `with` block without an exception calls `close()`, which
finishes the LZMA stream but leaves the underlying file open.
`LzmaReader` reads and checks the header when it is created. It is an
`io.RawIOBase`, so it offers `read()`, `readinto()` and can be wrapped in
`io.BufferedReader`:

```python
import io
from lzstream.writer import LzmaWriter, WriterConfig
from lzstream.reader import LzmaReader

out = io.BytesIO()
with LzmaWriter(out, WriterConfig(dict_cap=1 << 16)) as w:
    w.write(b"hello " * 1000)

reader = io.BufferedReader(LzmaReader(io.BytesIO(out.getvalue())))
data = reader.read()
```

`LzmaReader(stream, dict_cap=0)` uses the larger of `dict_cap` (0 meaning
8 MiB) and the capacity found in the header. After reading,
`eos_marker()` tells whether the stream ended with an end-of-stream marker.

`WriterConfig` fields; zero values select the defaults:

* `properties` (`lzstream.properties.Properties`), default `lc=3, lp=0, pb=2`
* `dict_cap`, default 8 MiB; must lie between 4096 and 2^32-1
* `buf_size`, the lookahead buffer, default 4096; at least 273
* `matcher`, `MatchAlgorithm.HASH_TABLE4` (default) or
  `MatchAlgorithm.BINARY_TREE`, from `lzstream.match_algorithm`
* `size` and `size_in_header`: a positive `size` stores the uncompressed
  size in the header
* `eos_marker`: always set when no size is stored in the header

With a size in the header, `LzmaWriter.write` refuses bytes beyond it: it
takes the part that fits and raises `NoSpaceError`, whose `written` attribute
holds the count taken. `close()` raises `DataError` if fewer bytes than the
stated size were written, and the writer then stays open.

`lzstream.header.valid_header(data)` checks whether 13 bytes look like a
plausible LZMA file header; `parse_header` and `Header.to_bytes` decode and
encode it.

## LZMA2

```python
from lzstream.writer2 import compress2, Writer2Config
from lzstream.reader2 import decompress2

packed = compress2(b"a" * 10000, Writer2Config(dict_cap=4096))
assert decompress2(packed, 4096) == b"a" * 10000
```

`Lzma2Writer(stream, config)` buffers compressed data. `flush()` writes all
buffered data out as complete chunks without ending the sequence; `close()`
flushes and writes the end-of-stream chunk. Chunks that would not shrink are
stored uncompressed. `Writer2Config` has the fields `properties`, `dict_cap`,
`buf_size` and `matcher` with the same defaults as above, and also requires
`lc + lp <= 4`.

`Lzma2Reader(stream, dict_cap=0)` is an `io.RawIOBase` reading a chunk
sequence; an error in the first chunk header is raised by the first read.
`eos()` tells whether the sequence was ended by an end-of-stream chunk.

`lzstream.chunk` has the chunk header helpers and `encode_dict_cap` /
`decode_dict_cap`, which convert between a dictionary capacity and the
one-byte capacity code used with LZMA2.

## Errors

Corrupt or truncated compressed input raises `lzstream.errors.DataError`.
Bad configuration values and other codec errors raise
`lzstream.errors.LzmaError`, the base class of `DataError`, `NoSpaceError` and
`LimitError`. A few low-level helpers raise `ValueError` for invalid
arguments, and `lzstream.chunk.read_chunk_header` raises `EOFError` when the
stream ends inside a header.

## What it does not do

* It does not read or write `.xz` container files (stream headers, block
  headers, indexes, checksums); it handles only the LZMA2 chunk sequences
  inside them.
* It has no command-line tool; it is a library only.
* Being pure Python, it is far slower than native LZMA implementations.