"""
GitHub OAuth sign-in and the signed session cookie.

The session lives entirely in the browser: the server only encodes,
signs and verifies it.
"""
