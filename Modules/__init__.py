"""Calculator Plus: expression engine, session state and PySide6 front end."""
