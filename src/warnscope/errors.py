"""Exception and warning types raised by warnscope."""


class WarnScopeError(Exception):
    """Base class for fatal errors; the configure run cannot continue."""


class ScopeDelimiterError(WarnScopeError):
    """A flag token contains the scope delimiter and cannot be saved on the stack."""


class UnknownTargetError(WarnScopeError):
    """Compile options were attached to a target that was never declared."""


class ScopeTreeError(WarnScopeError):
    """The scope-tree description is malformed."""


class WarningStackUnderflow(UserWarning):
    """``pop_warnings()`` was called with nothing on the stack."""
