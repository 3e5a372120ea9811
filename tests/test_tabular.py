"""Tests for tabular module."""

import pytest

from rfflightlog import tabular

HEADERS = ['id', 'name', 'note']


@pytest.fixture
def table_path(tmp_path):
    """Path to a table with a header and two rows."""
    path = tmp_path / 'table.csv'
    tabular.write_csv(path, HEADERS, [
        {'id': 1, 'name': 'Goblin', 'note': 'first'},
        {'id': 2, 'name': 'Logo 700', 'note': None},
    ])
    return path


class TestEscapeCsv:
    """Tests for escape_csv function."""

    def test_plain_value(self):
        assert tabular.escape_csv('abc') == 'abc'

    def test_number(self):
        assert tabular.escape_csv(3600) == '3600'

    def test_none(self):
        """None becomes an empty field."""
        assert tabular.escape_csv(None) == ''

    def test_delimiter_is_quoted(self):
        assert tabular.escape_csv('a,b') == '"a,b"'

    def test_quote_is_doubled(self):
        assert tabular.escape_csv('say "hi"') == '"say ""hi"""'


class TestWriteCsv:
    """Tests for writing tables."""

    def test_file_content(self, table_path):
        """Header first, then one line per row."""
        assert table_path.read_text() == 'id,name,note\n1,Goblin,first\n2,Logo 700,\n'

    def test_overwrites(self, table_path):
        """Writing a table replaces the previous content."""
        tabular.write_csv(table_path, HEADERS, [])
        assert table_path.read_text() == 'id,name,note\n'

    def test_append_row(self, table_path):
        """Appending adds a single line at the end."""
        tabular.write_csv_row(table_path, HEADERS, {'id': 3, 'name': 'Oxy'})
        assert table_path.read_text().endswith('2,Logo 700,\n3,Oxy,\n')

    def test_append_after_unterminated_row(self, tmp_path):
        """A missing final line break is added before the new row."""
        path = tmp_path / 'nonl.csv'
        path.write_text('id,name,note\n1,a,b')
        tabular.write_csv_row(path, HEADERS, {'id': 2, 'name': 'c'})
        assert path.read_text() == 'id,name,note\n1,a,b\n2,c,\n'

    def test_append_creates_file(self, tmp_path):
        path = tmp_path / 'new.csv'
        tabular.write_csv_row(path, HEADERS, {'id': 1})
        assert path.read_text() == '1,,\n'

    def test_extra_keys_ignored(self, tmp_path):
        """Keys outside the header are not written."""
        path = tmp_path / 'extra.csv'
        tabular.write_csv(path, HEADERS, [{'id': 1, 'name': 'a', 'note': 'b', 'other': 9}])
        assert path.read_text() == 'id,name,note\n1,a,b\n'


class TestReadCsv:
    """Tests for reading tables."""

    def test_read_csv(self, table_path):
        headers, rows = tabular.read_csv(table_path)
        assert headers == HEADERS
        assert rows == [
            {'id': '1', 'name': 'Goblin', 'note': 'first'},
            {'id': '2', 'name': 'Logo 700', 'note': ''},
        ]

    def test_read_headers(self, table_path):
        assert tabular.read_csv_headers(table_path) == HEADERS

    def test_read_headers_empty_file(self, tmp_path):
        """Empty file has no headers."""
        path = tmp_path / 'empty.csv'
        path.write_text('')
        assert tabular.read_csv_headers(path) == []

    def test_rows_from_open_file(self, table_path):
        """Rows can be streamed after reading the header from the same file."""
        with open(table_path, newline='') as f:
            headers = tabular.read_csv_headers_from_file(f)
            ids = [row['id'] for row in tabular.read_csv_rows_from_file(f, headers)]
        assert ids == ['1', '2']

    def test_short_row_is_padded(self, tmp_path):
        path = tmp_path / 'short.csv'
        path.write_text('id,name,note\n7\n')
        _, rows = tabular.read_csv(path)
        assert rows == [{'id': '7', 'name': '', 'note': ''}]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            tabular.read_csv(tmp_path / 'missing.csv')

    def test_round_trip_special_characters(self, tmp_path):
        """Quotes and delimiters survive a write and read."""
        path = tmp_path / 'special.csv'
        rows = [
            {'id': '1', 'name': 'He said "go"', 'note': 'a,b'},
            {'id': '2', 'name': '"', 'note': ',,'},
            {'id': '3', 'name': 'plain', 'note': ''},
        ]
        tabular.write_csv(path, HEADERS, rows)

        headers, read_rows = tabular.read_csv(path)
        assert headers == HEADERS
        assert read_rows == rows


class TestReadLastCsvRow:
    """Tests for reading the last row from the end of the file."""

    def test_last_row(self, table_path):
        assert tabular.read_last_csv_row(table_path, HEADERS) == {
            'id': '2', 'name': 'Logo 700', 'note': ''
        }

    def test_header_only(self, tmp_path):
        """A table without rows has no last row."""
        path = tmp_path / 'header.csv'
        tabular.write_csv(path, HEADERS, [])
        assert tabular.read_last_csv_row(path, HEADERS) is None

    def test_empty_file(self, tmp_path):
        path = tmp_path / 'empty.csv'
        path.write_text('')
        assert tabular.read_last_csv_row(path, HEADERS) is None

    def test_quoted_last_row(self, tmp_path):
        path = tmp_path / 'quoted.csv'
        tabular.write_csv(path, HEADERS, [{'id': 1, 'name': 'x, "y"', 'note': 'z'}])
        assert tabular.read_last_csv_row(path, HEADERS) == {
            'id': '1', 'name': 'x, "y"', 'note': 'z'
        }

    def test_long_table(self, tmp_path):
        """Rows spanning several seek blocks are found."""
        path = tmp_path / 'long.csv'
        rows = [{'id': i, 'name': 'n' * 300, 'note': i * 2} for i in range(50)]
        tabular.write_csv(path, HEADERS, rows)
        last = tabular.read_last_csv_row(path, HEADERS)
        assert last['id'] == '49'
        assert last['note'] == '98'

    def test_no_trailing_newline(self, tmp_path):
        path = tmp_path / 'nonl.csv'
        path.write_text('id,name,note\n1,a,b\n2,c,d')
        assert tabular.read_last_csv_row(path, HEADERS)['id'] == '2'
