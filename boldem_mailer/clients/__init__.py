from .base import AccessToken, BoldemError, Credentials, TokenAcquisitionError, TokenManager
from .http import BoldemHttpClient
from .result import Result, success, failure

__all__ = [
    'AccessToken','BoldemError','Credentials','TokenAcquisitionError','TokenManager',
    'BoldemHttpClient',
    'Result','success','failure',
]
