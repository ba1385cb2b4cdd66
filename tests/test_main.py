"""
End-to-end tests for the knn command line tool.
"""

import json
import os
import pytest
from knn.main import main


REFERENCE_CSV = """x,y,label
1.0,1.0,a
2.0,2.0,b
1.5,2.5,a
1.0,3.0,b
2.0,1.0,a
1.0,2.0,b
3.0,1.0,a
2.5,1.5,b
"""


@pytest.fixture
def csv_file(temp_dir):
    path = os.path.join(temp_dir, 'reference.csv')
    with open(path, 'w') as f:
        f.write(REFERENCE_CSV)
    return path


def test_predict(csv_file, capsys):
    status = main(['-f', csv_file, 'predict', '-k', '2-3', '-c', 'x', '-c', 'y',
                   '--label', 'label', '--datapoint', '1.5,1.0'])

    assert status == 0
    assert capsys.readouterr().out.splitlines() == [
        "k value: 2 | 1.5 1",
        "  a: 2 1.00",
        "k value: 3 | 1.5 1",
        "  a: 2 0.67",
        "  b: 1 0.33",
    ]


def test_predict_by_index_without_header(temp_dir, capsys):
    path = os.path.join(temp_dir, 'no_header.csv')
    with open(path, 'w') as f:
        f.write("".join(REFERENCE_CSV.splitlines(keepends=True)[1:]))

    status = main(['-f', path, '--no-header', 'predict', '-k', '2', '--algo', 'manhattan',
                   '-c', '0', '-c', '1', '--label', '2', '--datapoint', '1.5,1.5'])

    assert status == 0
    assert capsys.readouterr().out.splitlines() == [
        "k value: 2 | 1.5 1.5",
        "  a: 1 0.50",
        "  b: 1 0.50",
    ]


def test_predict_datapoint_mismatch(csv_file, capsys):
    status = main(['-f', csv_file, 'predict', '-c', 'x', '-c', 'y',
                   '--label', 'label', '--datapoint', '1.5'])

    assert status == 1
    assert "does not match number of columns" in capsys.readouterr().err


def test_predict_no_columns(csv_file, capsys):
    status = main(['-f', csv_file, 'predict', '--label', 'label', '--datapoint', '1.5'])

    assert status == 1
    assert "no columns specified" in capsys.readouterr().err


def test_missing_file(temp_dir, capsys):
    status = main(['-f', os.path.join(temp_dir, 'missing.csv'), 'predict', '-c', 'x',
                   '--label', 'label', '--datapoint', '1.5'])

    assert status == 1
    assert "[ERROR]" in capsys.readouterr().err


def test_empty_csv(temp_dir, capsys):
    path = os.path.join(temp_dir, 'empty.csv')
    with open(path, 'w') as f:
        f.write("x,y,label\n")

    status = main(['-f', path, 'search', '-c', 'x', '--label', 'label'])

    assert status == 1
    assert "contains no records" in capsys.readouterr().err


@pytest.mark.parametrize("k", ["0", "0-5", "5-2", "1-5,0", "abc"])
def test_malformed_k_rejected(csv_file, k):
    with pytest.raises(SystemExit) as excinfo:
        main(['-f', csv_file, 'predict', '-k', k, '-c', 'x', '--label', 'label',
              '--datapoint', '1.5'])

    assert excinfo.value.code == 2


def test_unknown_algorithm_rejected(csv_file):
    with pytest.raises(SystemExit):
        main(['-f', csv_file, 'search', '--algo', 'cosine', '-c', 'x', '--label', 'label'])


def test_search(csv_file, capsys):
    status = main(['-f', csv_file, 'search', '-k', '1-2', '-c', 'x', '-c', 'y',
                   '--label', 'label', '--test', '0.5'])

    assert status == 0

    lines = capsys.readouterr().out.splitlines()
    summary = [line for line in lines if line.startswith("k ") and "cols:" in line]

    assert lines[0] == "train size: 4 test size: 4"
    assert "k: 1" in lines
    assert "k: 2" in lines
    assert len(summary) == 4
    assert summary[0].startswith("k 1 % ")
    assert summary[-1].startswith("k 2 % ")


def test_search_defaults_from_config(csv_file, temp_dir, capsys):
    config_path = os.path.join(temp_dir, 'knn.json')
    with open(config_path, 'w') as f:
        json.dump({"search": {"k": "1", "test": 0.5}}, f)

    status = main(['--config', config_path, '-f', csv_file, 'search', '--no-trace',
                   '-c', 'x', '-c', 'y', '--label', 'label'])

    assert status == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "train size: 4 test size: 4"
    assert len(lines) == 3
    assert all(line.startswith("k 1 % ") for line in lines[1:])


def test_invalid_config(csv_file, temp_dir, capsys):
    config_path = os.path.join(temp_dir, 'knn.json')
    with open(config_path, 'w') as f:
        json.dump({"algo": "cosine"}, f)

    status = main(['--config', config_path, '-f', csv_file, 'search', '-c', 'x',
                   '--label', 'label'])

    assert status == 1
    assert "algo" in capsys.readouterr().err
