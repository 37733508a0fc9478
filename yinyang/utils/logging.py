from __future__ import annotations

import logging
from typing import Any, Dict


def setup_logger(level: int = logging.INFO) -> logging.Logger:
    """
    Создаёт и настраивает корневой логгер проекта ``yinyang``.

    :param level: минимальный уровень логирования
    :return: настроенный экземпляр :class:`logging.Logger`
    """
    logger = logging.getLogger("yinyang")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "[%(asctime)s] %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Чтобы сообщения не дублировались через root-логгер
    logger.propagate = False

    return logger


def format_run_prefix(meta: Dict[str, Any], name: str | None = None) -> str:
    """
    Префикс логов серии прогонов: размеры датасета, seed генерации и,
    если задано, имя реализации (``lloyd`` или ``yinyang``).

    ``purpose`` добавляется, только если отличается от ``base``.

    >>> format_run_prefix({"N": 100, "D": 2, "K": 8, "seed": 42}, "yinyang")
    '[N=100 D=2 K=8 seed=42] [yinyang]'
    """
    parts = [f"N={meta['N']}", f"D={meta['D']}", f"K={meta['K']}"]
    if "seed" in meta:
        parts.append(f"seed={meta['seed']}")
    purpose = meta.get("purpose", "base")
    if purpose != "base":
        parts.append(f"purpose={purpose}")

    prefix = "[" + " ".join(parts) + "]"
    return f"{prefix} [{name}]" if name else prefix
