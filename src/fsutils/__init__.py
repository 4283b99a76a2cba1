"""fsutils: path normalization, file search by extension, archive helpers and array pagination."""

from fsutils.exceptions import ApplicationError, FsUtilsError, InvalidArgumentError
from fsutils.finder import (
    copy,
    extract_zip_archive,
    get_files_by_extension,
    get_files_recursively_by_extension,
    list_files_by_extension,
    mkdir,
    resolve_filepath,
)
from fsutils.paginator import ArrayPaginator
from fsutils.path import (
    get_extension,
    normalize_path,
    readable_filesize,
    real_path,
    remove_extension,
)

__version__ = "0.1.0"

__all__ = [
    "ApplicationError",
    "ArrayPaginator",
    "FsUtilsError",
    "InvalidArgumentError",
    "copy",
    "extract_zip_archive",
    "get_extension",
    "get_files_by_extension",
    "get_files_recursively_by_extension",
    "list_files_by_extension",
    "mkdir",
    "normalize_path",
    "readable_filesize",
    "real_path",
    "remove_extension",
    "resolve_filepath",
]
