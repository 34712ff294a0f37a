import pandas as pd
import pytest

import sc_toolkit.jobs.cellranger as cellranger
import sc_toolkit.main as cli
from sc_toolkit.io import read_h5ad
from sc_toolkit.main import main

from conftest import GENES, make_adata


def test_cellranger_command(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(cellranger.subprocess, "run", lambda cmd, **kwargs: calls.append(cmd))

    main([
        "cellranger",
        "--fastq_dir", "/fq", "--out_dir", str(tmp_path / "out"), "--ref_dir", "/ref",
        "--project", "proj", "--samples", "s1", "s2",
        "--script_dir", str(tmp_path), "--no_submit",
    ])

    assert (tmp_path / "s1_cellranger_count.sh").exists()
    assert (tmp_path / "s2_cellranger_count.sh").exists()
    assert calls == []


def test_cellranger_command_uses_config(tmp_path, monkeypatch):
    monkeypatch.setattr(cellranger.subprocess, "run", lambda cmd, **kwargs: None)
    config = tmp_path / "my.yaml"
    config.write_text("cellranger:\n  cores: 4\n")

    main([
        "--config", str(config), "cellranger",
        "--fastq_dir", "/fq", "--out_dir", str(tmp_path / "out"), "--ref_dir", "/ref",
        "--project", "proj", "--samples", "s1", "--script_dir", str(tmp_path),
    ])

    assert "#$ -pe omp 4" in (tmp_path / "s1_cellranger_count.sh").read_text()


def test_load_command(tmp_path, cellranger_base):
    output = tmp_path / "raw.h5ad"

    main([
        "load", "--base_dir", str(cellranger_base), "--samples", "A", "B", "C",
        "--output", str(output), "--min_cells", "1", "--min_features", "1",
    ])

    adata = read_h5ad(str(output))
    assert list(adata.obs["SampleName"].unique()) == ["A", "C"]
    assert "pct_counts_mt" in adata.obs.columns


def test_markers_command_from_csv(tmp_path):
    markers_csv = tmp_path / "markers.csv"
    pd.DataFrame({"gene": ["CD3E", "LYZ"], "cluster": [0, 1]}).to_csv(markers_csv, index=False)
    output = tmp_path / "markers.xlsx"

    main(["markers", "--markers_csv", str(markers_csv), "--output", str(output)])

    assert list(pd.read_excel(output, sheet_name=None)) == ["0", "1", "all"]


def test_gene_command(tmp_path, counts, capsys):
    h5ad = tmp_path / "data.h5ad"
    make_adata(counts, GENES, "A").write_h5ad(h5ad)

    main(["gene", "--input", str(h5ad), "--gene", "CD3E"])

    assert "2 / 4" in capsys.readouterr().out


def test_failure_exits_with_status_1(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["gene", "--input", str(tmp_path / "missing.h5ad"), "--gene", "CD3E"])
    assert exc.value.code == 1


@pytest.mark.parametrize("flag, expected", [
    ([], True),
    (["--no-include_unmapped"], False),
])
def test_orthologs_include_unmapped_flag_overrides_config(tmp_path, monkeypatch, flag, expected):
    calls = []
    monkeypatch.setattr(cli, "merge_orthologs",
                        lambda *args, **kwargs: calls.append(kwargs) or "merged")
    monkeypatch.setattr(cli, "save_h5ad", lambda adata, path: None)
    config = tmp_path / "my.yaml"
    config.write_text("orthologs:\n  include_unmapped: true\n")

    main([
        "--config", str(config), "orthologs",
        "--base_dir", str(tmp_path), "--samples", "A",
        "--ortholog_csv", str(tmp_path / "orthologs.csv"),
        "--output", str(tmp_path / "out.h5ad"),
    ] + flag)

    assert calls[0]["include_unmapped"] is expected
