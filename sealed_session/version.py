"""Sealed Session Meta information.
   Sealed Session keeps user identity in an encrypted cookie and gates
   access to stored user data behind ownership and content policies.
"""
__title__ = 'sealed_session'
__description__ = (
   'Encrypted session cookies and access policies '
   'for user-owned stored data.'
)
__version__ = '0.3.0'
__license__ = 'Apache-2.0'
