# mtrprobe

mtrprobe sends ICMP echo probes with increasing TTL values to a host. It
prints an mtr-style report with one row per hop. Each row shows the loss,
the number of packets sent, and the last, average, best and worst
round-trip times in milliseconds. Each row can also show a location label
taken from a QQWry database. The package also has a simple repeated-echo
ping.

The package uses only the standard library. Raw ICMP sockets need root or
the `CAP_NET_RAW` capability.

## Installation

```
pip install .
```

## Command line

```
sudo mtrprobe example.com 192.0.2.1
```

For each target, the command resolves the name and takes the first address
it finds. It traces the route to that address and prints the report. The
trace uses 30 hops at most, 3 probes per hop and an 800 ms timeout. A
target that does not resolve gets an error message, and the command goes
on to the next target. If no target is given, the command prints
`miss target params` and exits with status 2.

Options:

- `-h` prints the usage and exits.
- `-v`, `-c N`, `-mtr [BOOL]` and `-ping [BOOL]` are accepted but have no
  effect yet. The command always runs the mtr report with the settings
  above.

## Library use

```python
from mtrprobe.mtr import mtr, run_mtr, format_report, MtrOptions
from mtrprobe.ping import ping

print(mtr("192.0.2.1", 30, 3, 800))      # max hops, probes per hop, timeout in ms

result = run_mtr("192.0.2.1", MtrOptions(max_hops=20, snt_size=5))
for hop in result.hops:                  # IcmpHop records
    print(hop.ttl, hop.address, hop.loss)
print(format_report(result, "192.0.2.1"))

print(ping("example.com", 4, 1000, 10))  # count, timeout in ms, interval in ms
```

### mtr

- `MtrOptions` holds the settings. A zero value for any setting falls back
  to its default: 30 hops, 800 ms timeout, 5 probes per hop, and a packet
  size of 56. The packet size is stored but not used.
- `batch_detect` sends one probe to every TTL in each round, all TTLs at
  once on a thread pool, for `snt_size` rounds.
- `aggregate` turns those rounds into `IcmpHop` statistics. The hop list
  stops at the first hop whose address is the destination.
- `run_mtr` does both of the steps above.
- `format_report` renders the table:
  - A hop that never answered is shown as `???` with 100% loss. Such a row
    only appears when an answered hop comes after it.
  - If the last hop did not answer, it is shown as a short `???` line.

### ping

- `run_ping` sends `count` echo requests with TTL 128 and returns a
  `PingResp`.
- `summarize` builds that summary from a list of round-trip times.
- `ping` resolves the name and returns the report text. It returns an
  empty string when the name resolves to no address.

In the ping report:

- The loss is a fraction, for example `0.25`, or `100` when no reply came.
- Both `rtt min/avg/max` lines print the worst time first and the best
  time last.

### Lower-level pieces

- `mtrprobe.icmp`:
  - `probe` sends a single echo request with a given TTL. It raises
    `ValueError` for an address that is not valid and `TimeoutError` when
    no matching reply arrives in time.
  - `build_echo_request`, `match_reply`, `echo_payload` and `checksum`
    are the packet helpers it uses.
- `mtrprobe.utils`:
  - `lookup_ips` resolves a name to its addresses.
  - `is_equal_ip` compares two address strings.
  - `time_to_float` turns a `timedelta` into milliseconds.
  - `goid` returns the current thread id.
- `mtrprobe.spew` has coloured console printers: `error`, `errorf`, `warn`,
  `info`, `debug`, `dump` and the others. Colour is used only on a
  terminal and is turned off when `NO_COLOR` is set.

## Location lookup

`mtrprobe.geoip.QQWry` reads a QQWry `.dat` file. Its `find` method looks
up an IPv4 address and returns `(country, city)`. It returns empty strings
for an IPv6 address.

`get_ip_info` uses the database at `~/gomtr/qqwry.dat` if that file is
present. Without the file it returns empty strings. The report labels each
answered hop `country:city`, so without a database the label is just `:`.

## What it does not do

- There is no live, continuously updating display. Each trace runs a fixed
  number of rounds and then prints one report.
- The command line cannot run a ping or change the probe settings. Use
  `mtrprobe.ping.ping` or `mtrprobe.mtr.mtr` from Python for that.