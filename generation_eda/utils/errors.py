from typing import Any, List, Optional


class DatasetError(Exception):
    """Base de los errores de carga, limpieza y descomposición."""


class ParseError(DatasetError):
    """Timestamp ilegible o duplicado en la columna de tiempo."""


class SchemaError(DatasetError, KeyError):
    """Falta una columna esperada en el CSV."""

    def __str__(self) -> str:
        # KeyError.__str__ pone comillas alrededor del mensaje
        return str(self.args[0]) if self.args else ""


class BoundaryGapError(DatasetError):
    """
    Hay huecos que tocan el inicio o el final de una serie y no se pueden
    interpolar. `result` contiene el dataset con el resto de huecos ya
    rellenados; el llamador decide si recorta esas filas.
    """

    def __init__(self, columns: List[str], result: Optional[Any] = None):
        self.columns = list(columns)
        self.result = result
        super().__init__(
            f"Huecos en el borde de la serie sin vecino para interpolar: {self.columns}"
        )


class InsufficientDataError(DatasetError, ValueError):
    """La serie es demasiado corta para el periodo pedido."""

    def __init__(self, length: int, period: int):
        self.length = length
        self.period = period
        super().__init__(
            f"Se necesitan al menos {2 * period} observaciones para period={period}, "
            f"la serie tiene {length}"
        )
