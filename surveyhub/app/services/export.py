# surveyhub/app/services/export.py
import csv
import io
from typing import Any, Dict, List

from surveyhub.app.schemas.results import SurveyResultsOut
from surveyhub.db.models import QuestionType

CSV_FIELDS = ["question", "type", "answer", "count", "percentage"]


class ResultsExporter:
    """Flattens aggregated survey results into table rows"""

    def __init__(self, results: SurveyResultsOut):
        self.results = results

    def rows(self) -> List[Dict[str, Any]]:
        rows = []
        for stat in self.results.statistics:
            if stat.question_type == QuestionType.open:
                for text in stat.answers or []:
                    rows.append({
                        "question": stat.question_text,
                        "type": stat.question_type.value,
                        "answer": text,
                        "count": 1,
                        "percentage": "",
                    })
                continue
            for option in stat.options or []:
                rows.append({
                    "question": stat.question_text,
                    "type": stat.question_type.value,
                    "answer": option.option_text,
                    "count": option.count,
                    "percentage": f"{option.percentage:.1f}",
                })
        return rows

    def to_csv(self) -> str:
        """Convert result rows to a CSV string"""
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=CSV_FIELDS)
        writer.writeheader()
        writer.writerows(self.rows())
        return output.getvalue()


def export_results_to_csv(results: SurveyResultsOut) -> str:
    return ResultsExporter(results).to_csv()
