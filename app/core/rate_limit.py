from slowapi import Limiter
from slowapi.util import get_remote_address

#one limiter shared by the app state and every router decorator
limiter = Limiter(key_func=get_remote_address)
