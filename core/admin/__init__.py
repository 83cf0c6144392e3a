"""
POS Admin
===========
Shop-wide settings and the command that updates them.
"""
