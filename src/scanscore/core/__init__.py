"""Core application components: configuration, exceptions, middleware, lifecycle."""
