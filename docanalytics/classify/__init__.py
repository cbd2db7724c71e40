from .classifier import Classifier
from .taxonomy import TAXONOMY, UNCLASSIFIED, TaxonomyEntry


__all__ = ["Classifier", "TAXONOMY", "UNCLASSIFIED", "TaxonomyEntry"]
