from minipy.lang.error import UndefinedVariableError


class Environment:
    """Single flat namespace of one interpreter session: name -> Value. Entries are created or overwritten by
    assignment and never deleted.
    """

    def __init__(self):
        self.variables = {}

    def set(self, name, value):
        self.variables[name] = value

    def get(self, name):
        """Returns the Value bound to name, raises UndefinedVariableError if there is none."""
        try:
            return self.variables[name]
        except KeyError:
            raise UndefinedVariableError("undefined variable '{}'", name) from None

    def __contains__(self, name):
        return name in self.variables

    def __len__(self):
        return len(self.variables)

    def __repr__(self):
        return f"Environment({', '.join(f'{name}={value}' for name, value in self.variables.items())})"
