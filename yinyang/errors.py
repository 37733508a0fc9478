"""
Виды ошибок входных данных и конфигурации.

Все проверки выполняются до начала вычислений; внутри численного ядра
исключения не ожидаются.
"""


class KMeansInputError(ValueError):
    """Базовая ошибка некорректных входных данных KMeans."""


class InvalidClusterCountError(KMeansInputError):
    """K <= 0 или число строк начальных центроидов не совпадает с K."""


class EmptyDatasetError(KMeansInputError):
    """Пустой набор точек (N == 0 или D == 0)."""


class DimensionMismatchError(KMeansInputError):
    """Размерности точек и центроидов не согласованы."""


class InvalidConfigError(KMeansInputError):
    """Недопустимые параметры алгоритма или параллелизма."""
