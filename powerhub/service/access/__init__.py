"""
The access layer wraps the record store. Every query the
system makes against it is spelled out explicitly in here.
"""
