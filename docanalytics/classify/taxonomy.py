# docanalytics/classify/taxonomy.py
"""
Static topic taxonomy: an ordered tuple of (label, keywords) pairs.

Order is significant: when two categories score the same, the one listed
first wins. Keep new categories appended to their section.
"""
from __future__ import annotations

from typing import NamedTuple, Tuple

UNCLASSIFIED = "Unclassified"


class TaxonomyEntry(NamedTuple):
    label: str
    keywords: Tuple[str, ...]


TAXONOMY: Tuple[TaxonomyEntry, ...] = (
    # Artificial Intelligence
    TaxonomyEntry("Computer Science > AI > NLP",
                  ("neural", "language model", "tokenizer", "transformer", "bert", "gpt")),
    TaxonomyEntry("Computer Science > AI > Machine Learning",
                  ("regression", "classifier", "training", "dataset", "scikit-learn",
                   "random forest", "gradient boosting")),
    TaxonomyEntry("Computer Science > AI > Computer Vision",
                  ("image", "opencv", "cnn", "detection", "segmentation", "yolo", "resnet")),

    # Web Development
    TaxonomyEntry("Computer Science > Web > Frontend",
                  ("html", "css", "javascript", "react", "vue", "tailwind", "bootstrap")),
    TaxonomyEntry("Computer Science > Web > Backend",
                  ("asp.net", "node.js", "django", "laravel", "api", "mvc", "controller")),
    TaxonomyEntry("Computer Science > Web > Full Stack",
                  ("full stack", "frontend", "backend", "rest", "json", "authentication")),

    # Cloud and Distributed Systems
    TaxonomyEntry("Computer Science > Cloud > Azure",
                  ("azure", "blob storage", "function app", "resource group", "app service")),
    TaxonomyEntry("Computer Science > Cloud > AWS",
                  ("aws", "s3", "ec2", "lambda", "dynamodb")),
    TaxonomyEntry("Computer Science > Cloud > Distributed Systems",
                  ("distributed", "latency", "replication", "scalability", "consistency")),

    # Data Science
    TaxonomyEntry("Computer Science > Data Science > Analytics",
                  ("data analysis", "pandas", "matplotlib", "notebook", "jupyter")),
    TaxonomyEntry("Computer Science > Data Science > Big Data",
                  ("hadoop", "spark", "big data", "data lake", "hive", "mapreduce")),

    # Cybersecurity
    TaxonomyEntry("Computer Science > Security > Network Security",
                  ("firewall", "ddos", "intrusion detection", "vpn", "packet")),
    TaxonomyEntry("Computer Science > Security > Cryptography",
                  ("encryption", "rsa", "aes", "public key", "digital signature")),

    # Databases
    TaxonomyEntry("Computer Science > Databases > SQL",
                  ("sql", "select", "join", "stored procedure", "query", "index")),
    TaxonomyEntry("Computer Science > Databases > NoSQL",
                  ("mongodb", "nosql", "document store", "collection", "shard")),

    # Operating Systems
    TaxonomyEntry("Computer Science > Systems > Operating Systems",
                  ("kernel", "process", "thread", "scheduling", "memory management", "semaphore")),

    # Networking
    TaxonomyEntry("Computer Science > Networking > Protocols",
                  ("http", "tcp", "ip", "udp", "dns", "routing", "packet")),

    # Software Engineering
    TaxonomyEntry("Computer Science > Software Engineering > Methodologies",
                  ("agile", "scrum", "kanban", "sprint", "requirements", "user stories")),
    TaxonomyEntry("Computer Science > Software Engineering > Testing",
                  ("unit test", "integration test", "tdd", "mock", "xunit", "jest")),
)
