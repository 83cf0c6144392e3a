"""
POS Auth
==========
Verification codes, signup and the login check.
"""
