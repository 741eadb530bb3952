"""Delivery of composed messages.

The composition core never sends anything itself; a transport reads the
envelope sender, the full recipient list and the payload from a Message,
then settles ``message.completion``. ``smtp`` holds the SMTP transport.
"""
