# === FILE: site_mapper/config.py ===
"""
Модуль для загрузки и валидации конфигурации SiteMapper.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Literal, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, HttpUrl

ErrorPolicy = Literal["skip", "abort"]
UrlPolicyName = Literal["exact", "strip-trailing-slash"]


class CrawlConfig(BaseModel):
    """Конфигурация для одного запуска обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    base_url: HttpUrl = Field(
        "http://gophercises.com", validate_default=True, description="Корневой URL обхода."
    )
    max_depth: int = Field(3, ge=0, description="Максимальная глубина обхода (включительно).")
    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field("SiteMapperBot/1.0", min_length=1, description="Заголовок User-Agent.")
    on_error: ErrorPolicy = Field(
        "skip", description="skip — пропустить страницу с ошибкой, abort — прервать обход."
    )
    url_policy: UrlPolicyName = Field("exact", description="Политика нормализации URL.")

    def with_overrides(self, **overrides: Any) -> CrawlConfig:
        """Возвращает новую проверенную конфигурацию; значения None игнорируются."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return CrawlConfig(**data)


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CrawlConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlConfig.
    Без пути использует configs/default.yaml, а если его нет — значения по умолчанию.
    При отсутствии явно указанного файла бросает FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return CrawlConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return CrawlConfig(**data)
