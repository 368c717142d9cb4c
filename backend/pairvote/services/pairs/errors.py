INVALID_PAIR_ID = 'INVALID_PAIR_ID'
PAIR_NOT_FOUND = 'PAIR_NOT_FOUND'
PAIR_FULL = 'PAIR_FULL'
NOT_IN_PAIR = 'NOT_IN_PAIR'
INVALID_PAIR_OR_MEMBER = 'INVALID_PAIR_OR_MEMBER'
PAIR_ID_EXHAUSTED = 'PAIR_ID_EXHAUSTED'


class PairError(Exception):
    """A rejected pair operation, reported to the caller as ``code``."""

    def __init__(self, code: str, message: str = ''):
        super().__init__(message or code)
        self.code = code

    def to_reply(self):
        return {'ok': False, 'error': self.code}
