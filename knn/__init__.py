"""
k nearest neighbors classification and greedy feature search over CSV data
"""

from .classify import classify_datapoint, label_percentages, majority_label
from .dataset_loader import Dataset, get_dataset_info, load_csv_dataset, split_dataset
from .distance import DISTANCE_FUNCTIONS, euclidean, get_distance_function, manhattan
from .kvalue import KValue
from .predict import Prediction, knn_predict
from .search import CandidateScore, SearchReport, SearchResult, SearchStep, knn_search

__all__ = [
    'classify_datapoint', 'label_percentages', 'majority_label',
    'Dataset', 'get_dataset_info', 'load_csv_dataset', 'split_dataset',
    'DISTANCE_FUNCTIONS', 'euclidean', 'get_distance_function', 'manhattan',
    'KValue',
    'Prediction', 'knn_predict',
    'CandidateScore', 'SearchReport', 'SearchResult', 'SearchStep', 'knn_search',
]
