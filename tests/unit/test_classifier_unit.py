# tests/unit/test_classifier_unit.py
import pytest

from docanalytics.classify import TAXONOMY, UNCLASSIFIED, Classifier, TaxonomyEntry


@pytest.fixture
def clf():
    return Classifier()


def test_taxonomy_is_ordered_and_complete():
    names = [entry.label for entry in TAXONOMY]
    assert len(names) == 19
    assert names[0] == "Computer Science > AI > NLP"
    assert names[-1] == "Computer Science > Software Engineering > Testing"
    assert len(set(names)) == len(names)


def test_every_keyword_is_lowercase():
    for entry in TAXONOMY:
        assert entry.keywords, entry.label
        assert all(k == k.lower() for k in entry.keywords), entry.label


def test_empty_and_none_content_is_unclassified(clf):
    assert clf.classify("") == UNCLASSIFIED
    assert clf.classify(None) == UNCLASSIFIED
    assert clf.score("") == []


def test_no_keyword_hits_is_unclassified(clf):
    assert clf.classify("zzz qqq vvv") == UNCLASSIFIED


def test_matching_is_case_insensitive(clf):
    assert clf.classify("AZURE Blob Storage behind an App Service") == "Computer Science > Cloud > Azure"


def test_substring_containment_counts(clf):
    # "kernel" and "process" both hit, with no whole-word requirement
    scores = dict(clf.score("kernels processing"))
    assert scores["Computer Science > Systems > Operating Systems"] == 2


def test_keyword_counted_once_however_often_it_appears(clf):
    scores = dict(clf.score("hadoop hadoop hadoop"))
    assert scores["Computer Science > Data Science > Big Data"] == 1


def test_highest_distinct_keyword_count_wins(clf):
    text = "We use pandas in a jupyter notebook. One spark job too."
    assert clf.classify(text) == "Computer Science > Data Science > Analytics"


def test_tie_goes_to_earliest_entry():
    taxonomy = (
        TaxonomyEntry("First", ("alpha", "beta")),
        TaxonomyEntry("Second", ("gamma", "delta")),
    )
    clf = Classifier(taxonomy)
    assert clf.classify("delta gamma beta alpha") == "First"
    assert clf.classify("gamma delta alpha") == "Second"


def test_shared_keyword_scores_for_every_entry(clf):
    # "packet" belongs to both Network Security and Protocols
    scores = dict(clf.score("packet"))
    assert scores["Computer Science > Security > Network Security"] == 1
    assert scores["Computer Science > Networking > Protocols"] == 1
    assert clf.classify("packet") == "Computer Science > Security > Network Security"


def test_duplicate_keywords_are_collapsed():
    clf = Classifier((TaxonomyEntry("Only", ("Foo", "foo", "FOO")),))
    assert clf.score("foo") == [("Only", 1)]


def test_classify_timed_reports_label_and_duration(clf):
    label, ms = clf.classify_timed("react and css and html")
    assert label == "Computer Science > Web > Frontend"
    assert isinstance(ms, float) and ms >= 0.0
