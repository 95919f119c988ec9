from abc import ABC, abstractmethod


class TypeOracle(ABC):
    """Abstract interface for a full type-resolution capability.

    Implementations wrap an external type checker built over the same script
    text the syntax tree was parsed from.
    """

    @abstractmethod
    def resolve_parameter_type(self, node) -> str | None:
        """Resolve the declared or contextual type of a parameter.

        Args:
            node: Parameter syntax node

        Returns:
            The printed type, or None if it cannot be resolved
        """
        pass

    @abstractmethod
    def resolve_return_type(self, node) -> str | None:
        """Resolve the return type of a function-like node.

        Args:
            node: Function, arrow function, or function expression node

        Returns:
            The printed type, or None if it cannot be resolved
        """
        pass
