"""pseudoserver: a single-user InspIRCd link bot.

Links to a network over the server-to-server protocol, bursts one server,
one bot user and a fixed channel set, then answers PING and addressed
PRIVMSG commands.
"""

__version__ = "0.1.0"
