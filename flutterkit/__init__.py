"""
FlutterKit - installs Flutter SDK releases on build agents.
"""
