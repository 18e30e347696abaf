"""
This module provides the console reporting helpers used across the evolution engine.

diag_print emits a tagged line when the configured verbosity reaches the requested
level on the usual scale of errors, progress, input echo, units and everything.
rate_limited_print lets repetitive per-step diagnostics through for the first few
occurrences of a key and then only at a fixed interval, so long integrations keep a
readable console. Both accept any object with the EvolveConfig verbosity fields, or
None, in which case defaults apply.
"""

from __future__ import annotations

VERB_QUIET = 0
VERB_ERR = 1
VERB_PROG = 2
VERB_INPUT = 3
VERB_UNITS = 4
VERB_ALL = 5

_GLOBAL_DIAG_COUNTS: dict = {}


def diag_print(cfg, level: int, tag: str, msg: str) -> None:
	if cfg is None:
		verbose = VERB_PROG
	else:
		verbose = int(getattr(cfg, "verbose", VERB_PROG))
	if verbose < level:
		return
	if tag:
		print(f"[{tag}] {msg}")
	else:
		print(msg)


def rate_limited_print(cfg, key: str, msg: str) -> None:
	if cfg is None:
		limit = 3
		interval = 1000
		verbose = VERB_PROG
	else:
		limit = int(getattr(cfg, "diag_print_limit", 3))
		interval = int(getattr(cfg, "diag_print_interval", 1000))
		verbose = int(getattr(cfg, "verbose", VERB_PROG))
	if verbose < VERB_PROG:
		return
	if limit < 0:
		limit = 0
	if interval < 1:
		interval = 1

	c = _GLOBAL_DIAG_COUNTS.get(key, 0) + 1
	_GLOBAL_DIAG_COUNTS[key] = c
	if c <= limit or (c % interval) == 0:
		print(f"[diag:{key}#{c}] {msg}")


def reset_counts() -> None:
	_GLOBAL_DIAG_COUNTS.clear()


__all__ = [
	"VERB_QUIET",
	"VERB_ERR",
	"VERB_PROG",
	"VERB_INPUT",
	"VERB_UNITS",
	"VERB_ALL",
	"diag_print",
	"rate_limited_print",
	"reset_counts",
]
