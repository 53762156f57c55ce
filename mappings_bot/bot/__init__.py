"""
Bot client, configuration and database connection.
"""
