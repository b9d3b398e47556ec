from luxselle.models.evaluation import Evaluation
from luxselle.repos.base import BaseRepo


class EvaluationRepo(BaseRepo[Evaluation]):
    model = Evaluation
    entity_name = "Evaluation"
