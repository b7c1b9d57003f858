"""warnscope: scoped compiler warning-flag management.

Probes which warning flags the active C compiler accepts, keeps one ordered
flag sequence per build-configuration scope, and offers push/pop snapshots
plus targeted removal and suppression of warnings for subdirectories and
individual targets.
"""

__version__ = "0.1.0"
