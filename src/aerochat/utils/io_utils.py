# Copyright 2025 - Oumi
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import os
import tempfile
from pathlib import Path
from typing import Any, Union

import jsonlines


def load_file(filename: Union[str, Path], encoding: str = "utf-8") -> str:
    """Load a file as a string.

    Args:
        filename: Path to the file.
        encoding: Encoding to use when reading the file. Defaults to "utf-8".

    Returns:
        str: The content of the file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
    """
    file_path = Path(filename)
    if not file_path.exists():
        raise FileNotFoundError(f"The file {filename} does not exist.")

    with file_path.open("r", encoding=encoding) as file:
        return file.read()


def save_file_atomic(
    filename: Union[str, Path], content: str, encoding: str = "utf-8"
) -> None:
    """Writes a string to a file, replacing it in a single step.

    The content is written to a temporary file in the same directory, which then
    replaces the target. Readers never observe a partially written file.

    Raises:
        OSError: If the file cannot be written.
    """
    file_path = Path(filename)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w",
        encoding=encoding,
        dir=file_path.parent,
        prefix=f".{file_path.name}.",
        suffix=".tmp",
        delete=False,
    ) as tmp_file:
        tmp_file.write(content)
        tmp_path = Path(tmp_file.name)
    try:
        os.replace(tmp_path, file_path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


def load_jsonlines(filename: Union[str, Path]) -> list[dict[str, Any]]:
    """Load a jsonlines file.

    Args:
        filename: Path to the jsonlines file.

    Returns:
        List[Dict[str, Any]]: A list of dictionaries, each representing a
            JSON object from the file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        jsonlines.InvalidLineError: If the file contains invalid JSON.
    """
    file_path = Path(filename)

    if file_path.is_dir():
        raise ValueError(
            f"Provided path is a directory, expected a file: '{filename}'."
        )

    if not file_path.is_file():
        raise FileNotFoundError(f"Provided path does not exist: '{filename}'.")

    with jsonlines.open(file_path) as reader:
        return list(reader)


def save_jsonlines(filename: Union[str, Path], data: list[dict[str, Any]]) -> None:
    """Save a list of dictionaries to a jsonlines file.

    Args:
        filename: Path to the jsonlines file to be created or overwritten.
        data: A list of dictionaries to be saved as JSON objects.

    Raises:
        IOError: If there's an error writing to the file.
    """
    file_path = Path(filename)

    try:
        with jsonlines.open(file_path, mode="w") as writer:
            writer.write_all(data)
    except OSError as e:
        raise OSError(f"Error writing to file {filename}") from e
