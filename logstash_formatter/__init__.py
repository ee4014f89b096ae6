"""
Logstash Formatter - renders Python log records as Logstash JSON events.

Structure:
- core/     : configuration, error contract, diagnostic context, own logging
- models/   : event and API models
- services/ : the encoder and its parts (message templating, throwables)
- api/      : preview service routes
"""

__version__ = "1.0.0"
