import pandas as pd
from pathlib import Path

def save_dataframe(df: pd.DataFrame, path: Path, *, excel_copy: bool = False, index: bool = False) -> Path:
    """
    Save a DataFrame to Parquet for fast I/O with an optional Excel copy for human readability.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_parquet(path, index=index)

    if excel_copy:
        excel_path = path.with_suffix(".xlsx")
        df.to_excel(excel_path, index=index)

    return path


def read_dataframe(path: Path) -> pd.DataFrame:
    """
    Load a DataFrame from Parquet/Excel/CSV based on file extension.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".parquet":
        return pd.read_parquet(path)
    if suffix in {".xlsx", ".xls"}:
        return pd.read_excel(path)
    if suffix == ".csv":
        return pd.read_csv(path)

    raise ValueError(f"Unsupported file extension for reading: {suffix}")
