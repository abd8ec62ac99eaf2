# site_mapper/report/json_report.py

"""
Генерация JSON-отчёта для проекта SiteMapper.

Сериализация списка найденных URL в файл.
"""
import json
from pathlib import Path
from typing import List


def dump_json(urls: List[str]) -> str:
    """Возвращает JSON-представление результата обхода."""
    return json.dumps({"count": len(urls), "urls": list(urls)}, ensure_ascii=False, indent=2)


def render_json(urls: List[str], output_path: Path | str) -> Path:
    """
    Сохраняет список urls в формате JSON по указанному пути.

    :param urls: URL, найденные при обходе
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла

    Пример:
    ```python
    from site_mapper.report.json_report import render_json
    report_path = render_json(urls, 'reports/sitemap.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        f.write(dump_json(urls))
        f.write('\n')

    return output
