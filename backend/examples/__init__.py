"""
Runnable usage examples, not part of the served application.

- config_example: load the configuration and print it with the DSN
  (``python -m backend.examples.config_example``)
- db_example: open the pool and print the server version
  (``python -m backend.examples.db_example``)
"""
