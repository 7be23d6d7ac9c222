"""Test that the hit and waveform readers work as intended."""

import os

import h5py
import numpy as np
import pandas as pd
import pytest

from opflash.io import HitCSVReader, WaveformHDF5Reader, reader_factory

HIT_COLUMNS = {
    "entry": [3, 3, 3, 7, 7],
    "channel": [0, 1, 2, 0, 4],
    "peak_time": [1.0, 1.1, 1.2, 5.0, 5.5],
    "peak_time_abs": [1.0, 1.1, 1.2, 5.0, 5.5],
    "frame": [0, 0, 0, 1, 1],
    "width": [0.1, 0.1, 0.1, 0.2, 0.2],
    "area": [50.0, 60.0, 70.0, 80.0, 90.0],
    "amplitude": [100.0, 120.0, 140.0, 160.0, 180.0],
    "pe": [5.0, 6.0, 7.0, 8.0, 9.0],
}


@pytest.fixture(name="hit_file")
def fixture_hit_file(tmp_path):
    """Writes a CSV file with two entries worth of hits.

    Parameters
    ----------
    tmp_path : str
       Generic pytest fixture used to handle temporary test files
    """
    file_path = os.path.join(tmp_path, "hits.csv")
    pd.DataFrame(HIT_COLUMNS).to_csv(file_path, index=False)

    return file_path


@pytest.fixture(name="waveform_file")
def fixture_waveform_file(tmp_path):
    """Writes an HDF5 file with two entries worth of waveforms."""
    file_path = os.path.join(tmp_path, "waveforms.h5")
    adcs = np.full((3, 64), 2000, dtype=np.int16)
    adcs[1, 20:25] += 100
    with h5py.File(file_path, "w") as out_file:
        out_file.create_dataset("entry", data=np.array([0, 0, 1]))
        out_file.create_dataset("channel", data=np.array([4, 5, 6]))
        out_file.create_dataset("time_slice", data=np.array([0, 128, 256]))
        out_file.create_dataset("frame", data=np.array([0, 0, 2]))
        out_file.create_dataset("adcs", data=adcs)

    return file_path


def test_hit_reader(hit_file):
    """Tests the loading of hits from a CSV file."""
    reader = HitCSVReader(hit_file)
    assert len(reader) == 2

    data = reader[0]
    assert data["entry"] == 3
    assert data["file_index"] == 0
    assert len(data["hits"]) == 3
    assert [h.id for h in data["hits"]] == [0, 1, 2]
    assert [h.channel for h in data["hits"]] == [0, 1, 2]
    assert data["hits"][2].pe == 7.0
    assert data["hits"][2].fast_to_total == 0.0

    data = reader[1]
    assert data["entry"] == 7
    assert [h.frame for h in data["hits"]] == [1, 1]

    assert [d["entry"] for d in reader] == [3, 7]


def test_hit_reader_fast_to_total(tmp_path):
    """Tests that the optional prompt fraction column is read."""
    file_path = os.path.join(tmp_path, "hits_fast.csv")
    columns = dict(HIT_COLUMNS, fast_to_total=[0.1, 0.2, 0.3, 0.4, 0.5])
    pd.DataFrame(columns).to_csv(file_path, index=False)

    hits = HitCSVReader(file_path)[1]["hits"]
    assert [h.fast_to_total for h in hits] == [0.4, 0.5]


def test_hit_reader_missing_column(tmp_path):
    """Tests that a file without a required column is rejected."""
    file_path = os.path.join(tmp_path, "hits_bad.csv")
    columns = {k: v for k, v in HIT_COLUMNS.items() if k != "pe"}
    pd.DataFrame(columns).to_csv(file_path, index=False)

    with pytest.raises(KeyError):
        HitCSVReader(file_path)


def test_reader_file_list(tmp_path):
    """Tests the loading of several files, listed in a text file or a glob."""
    for i in range(2):
        columns = dict(HIT_COLUMNS, entry=[10 * i + e for e in HIT_COLUMNS["entry"]])
        file_path = os.path.join(tmp_path, f"hits_{i}.csv")
        pd.DataFrame(columns).to_csv(file_path, index=False)

    list_path = os.path.join(tmp_path, "files.txt")
    with open(list_path, "w", encoding="utf-8") as f:
        f.write(os.path.join(tmp_path, "hits_1.csv") + "\n")
        f.write(os.path.join(tmp_path, "hits_0.csv") + "\n")

    for file_keys in (list_path, os.path.join(tmp_path, "hits_*.csv")):
        reader = HitCSVReader(file_keys)
        assert len(reader) == 4
        assert [d["entry"] for d in reader] == [3, 7, 13, 17]
        assert reader[2]["file_index"] == 1
        assert reader.get_file_entry_index(3) == 1

    reader = HitCSVReader(os.path.join(tmp_path, "hits_*.csv"), limit_num_files=1)
    assert len(reader) == 2


def test_reader_missing_files(tmp_path):
    """Tests that missing input files are reported."""
    with pytest.raises(FileNotFoundError):
        HitCSVReader(os.path.join(tmp_path, "missing_*.csv"))
    with pytest.raises(FileNotFoundError):
        HitCSVReader(os.path.join(tmp_path, "missing.txt"))
    with pytest.raises(ValueError):
        HitCSVReader(None)


def test_reader_entry_selection(hit_file, tmp_path):
    """Tests the selection of a subset of the entries."""
    assert [d["entry"] for d in HitCSVReader(hit_file, n_skip=1)] == [7]
    assert [d["entry"] for d in HitCSVReader(hit_file, n_entry=1)] == [3]
    assert [d["entry"] for d in HitCSVReader(hit_file, entry_list=[1])] == [7]
    assert [d["entry"] for d in HitCSVReader(hit_file, skip_entry_list=[1])] == [3]

    list_path = os.path.join(tmp_path, "entries.txt")
    with open(list_path, "w", encoding="utf-8") as f:
        f.write("1, 0\n")
    assert [d["entry"] for d in HitCSVReader(hit_file, entry_list=list_path)] == [7, 3]

    with pytest.raises(ValueError):
        HitCSVReader(hit_file, n_entry=3)
    with pytest.raises(ValueError):
        HitCSVReader(hit_file, n_entry=1, entry_list=[0])
    with pytest.raises(IndexError):
        HitCSVReader(hit_file, entry_list=[2])


def test_waveform_reader(waveform_file):
    """Tests the loading of waveforms from an HDF5 file."""
    reader = WaveformHDF5Reader(waveform_file)
    assert len(reader) == 2

    data = reader[0]
    assert data["entry"] == 0
    waveforms = data["waveforms"]
    assert [w.channel for w in waveforms] == [4, 5]
    assert [w.time_slice for w in waveforms] == [0, 128]
    assert waveforms[1].adcs.dtype == np.int16
    assert len(waveforms[1].adcs) == 64
    assert waveforms[1].adcs[22] == 2100

    waveforms = reader[1]["waveforms"]
    assert len(waveforms) == 1
    assert waveforms[0].frame == 2


def test_waveform_reader_unsigned(tmp_path):
    """Tests that unsigned 16-bit samples above 32767 are preserved."""
    file_path = os.path.join(tmp_path, "waveforms_uint16.h5")
    adcs = np.full((1, 16), 40000, dtype=np.uint16)
    with h5py.File(file_path, "w") as out_file:
        out_file.create_dataset("entry", data=np.array([0]))
        out_file.create_dataset("channel", data=np.array([0]))
        out_file.create_dataset("time_slice", data=np.array([0]))
        out_file.create_dataset("frame", data=np.array([0]))
        out_file.create_dataset("adcs", data=adcs)

    waveform = WaveformHDF5Reader(file_path)[0]["waveforms"][0]
    assert waveform.adcs.dtype == np.uint16
    assert waveform.adcs[0] == 40000
    assert np.all(waveform.adcs > 0)


def test_waveform_reader_missing_dataset(tmp_path):
    """Tests that a file without a required dataset is rejected."""
    file_path = os.path.join(tmp_path, "waveforms_bad.h5")
    with h5py.File(file_path, "w") as out_file:
        out_file.create_dataset("entry", data=np.array([0]))

    with pytest.raises(KeyError):
        WaveformHDF5Reader(file_path)


def test_reader_factory(hit_file, waveform_file):
    """Tests the instantiation of readers from their configuration."""
    reader = reader_factory({"name": "hit_csv", "file_keys": hit_file})
    assert isinstance(reader, HitCSVReader)

    reader = reader_factory({"name": "WaveformHDF5Reader", "file_keys": waveform_file})
    assert isinstance(reader, WaveformHDF5Reader)

    with pytest.raises(ValueError):
        reader_factory({"name": "larcv", "file_keys": hit_file})
