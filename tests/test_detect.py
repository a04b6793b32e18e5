from app.data.detect import (
    ColumnMap,
    detect_delimiter,
    detect_schema,
    find_column,
    resolve_columns,
    split_header,
    strip_bom,
)


def test_semicolon_header_uses_semicolon():
    assert detect_delimiter("Data;Operadora;Cliente;Pacote") == ";"


def test_comma_header_uses_comma():
    assert detect_delimiter("Data,Operadora,Cliente,Pacote") == ","


def test_semicolon_wins_when_both_present():
    assert detect_delimiter("Data;Valor Venda (1,5)") == ";"


def test_split_header_trims_and_strips_quotes():
    assert split_header(' "Data" ; "Operadora" ;Cliente ', ";") == ["Data", "Operadora", "Cliente"]


def test_strip_bom():
    assert strip_bom("\ufeffData;Operadora") == "Data;Operadora"
    assert strip_bom("Data;Operadora") == "Data;Operadora"


def test_find_column_exact_and_substring_case_insensitive():
    headers = ["DATA", "Total Venda", "Valor Venda (MT)"]
    assert find_column(headers, ["Data"]) == 0
    # First matching header wins, whichever alias it matches
    assert find_column(headers, ["Valor Venda", "Venda"]) == 1
    assert find_column(headers, ["Custo"]) is None


def test_resolve_columns_ignores_column_order():
    columns = resolve_columns(["Status", "Lucro", "Valor Venda", "Cliente", "Data"])
    assert columns == ColumnMap(
        date=4, operator=None, client=3, package=None, category=None,
        sale_value=2, cost=None, profit=1, status=0,
    )
    assert columns.has_economics


def test_has_economics_false_without_cost_and_profit():
    columns = resolve_columns(["Data", "Operadora", "Pacote", "Valor Venda"])
    assert columns.cost is None and columns.profit is None
    assert not columns.has_economics


def test_detect_schema_strips_bom_from_header(sales_csv):
    schema = detect_schema("\ufeff" + sales_csv)
    assert schema.delimiter == ";"
    assert schema.headers[0] == "Data"
    assert schema.columns.date == 0
    assert schema.columns.sale_value == 5
    assert schema.columns.status == 8
