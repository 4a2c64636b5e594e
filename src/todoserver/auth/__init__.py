"""Authentication and authorization.

Three pieces, each constructed from startup configuration:
1. PasswordHasher → bcrypt hash/verify with a tunable cost factor
2. TokenService → signed, time-limited JWT bearer tokens (HS256)
3. get_current_user → the gate every protected route sits behind

The gate resolves the token to a CurrentIdentity, which downstream code
uses to scope every task query to its owner.
"""
