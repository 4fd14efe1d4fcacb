"""Sealed Session constants.

Cookie name, request/app keys and the environment variables read at startup.
"""
SESSION_COOKIE_NAME = 'session'
SESSION_COOKIE_PATH = '/'

# request key holding the resolved SessionRecord (or None)
SESSION_KEY = 'session'

# environment
ENV_MASTER_KEY = 'SESSION_MASTER_KEY'
ENV_CIPHER_BACKEND = 'SESSION_CIPHER_BACKEND'
ENV_COOKIE_SECURE = 'SESSION_COOKIE_SECURE'

CIPHER_BACKENDS = ('aesgcm', 'chacha20')
