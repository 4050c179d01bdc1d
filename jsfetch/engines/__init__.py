"""
Fetch engines and the components they are built from.

- capabilities: browser profile sent to the hub
- session: acquire/release against the hub
- timing: page-load ceiling and dwell
- extractor: rendered DOM as bytes
- browser: the fetch state machine
"""
