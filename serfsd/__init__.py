"""Serf service discovery (serfsd).

Long-running adapter that turns the member list of a Serf cluster into
Prometheus target groups:
 - polls the Serf agent on a fixed cadence
 - republishes every member as a ``host:port`` scrape target
 - emits tombstones for members that disappeared
 - writes a file_sd compatible JSON file and serves the same list over HTTP
"""
