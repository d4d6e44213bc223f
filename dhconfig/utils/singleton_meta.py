"""
dhconfig.utils.singleton_meta
=============================

Metaclass for implementing the Singleton pattern.
"""


class SingletonMeta(type):
    """
    Metaclass that implements the Singleton pattern.

    This metaclass ensures that only one instance of a class is created.
    All subsequent instantiations return the same instance, whatever
    arguments they pass (the first caller wins).

    Example
    -------
    >>> class MyClass(metaclass=SingletonMeta):
    ...     pass
    >>> a = MyClass()
    >>> b = MyClass()
    >>> a is b  # True
    >>> MyClass.reset_instance()
    >>> MyClass() is a  # False
    """

    _instances = {}

    def __call__(cls, *args, **kwargs):
        """Return existing instance if it exists, otherwise create new instance."""
        if cls not in cls._instances:
            cls._instances[cls] = super().__call__(*args, **kwargs)
        return cls._instances[cls]

    def has_instance(cls) -> bool:
        """Return True once the singleton has been created."""
        return cls in cls._instances

    def reset_instance(cls) -> None:
        """Forget the current instance so the next call builds a new one."""
        cls._instances.pop(cls, None)
