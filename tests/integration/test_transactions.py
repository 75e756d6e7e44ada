"""
Stream and JavaScript transactions
"""

import pytest
from arango.exceptions import TransactionCommitError, TransactionExecuteError

from arangotest.core import skip_below_version
from arangotest.utils.error_handling import is_invalid_request


@pytest.fixture(autouse=True)
def stream_transactions_supported(client):
    skip_below_version(client, "3.5")


class TestStreamTransactions:

    def test_commit_transaction(self, database, collection):
        txn = database.begin_transaction(write=collection.name)
        txn.collection(collection.name).insert({"_key": "a", "value": 1})

        assert txn.transaction_status() == "running"
        assert collection.count() == 0

        txn.commit_transaction()
        assert collection.get("a")["value"] == 1

    def test_abort_transaction(self, database, collection):
        txn = database.begin_transaction(write=collection.name)
        txn.collection(collection.name).insert({"_key": "a"})

        txn.abort_transaction()
        assert collection.count() == 0

    def test_commit_after_abort_fails(self, database, collection):
        txn = database.begin_transaction(write=collection.name)
        txn.abort_transaction()
        with pytest.raises(TransactionCommitError):
            txn.commit_transaction()

    def test_transaction_reads_own_writes(self, database, collection):
        collection.insert({"_key": "a", "value": 1})
        txn = database.begin_transaction(read=collection.name, write=collection.name)
        txn_col = txn.collection(collection.name)
        txn_col.update({"_key": "a", "value": 2})

        assert txn_col.get("a")["value"] == 2
        assert collection.get("a")["value"] == 1
        txn.commit_transaction()
        assert collection.get("a")["value"] == 2


class TestJavaScriptTransactions:

    def test_return_value(self, database, collection):
        result = database.execute_transaction(
            "function () { return 'worked!'; }",
            read=[collection.name],
            write=[collection.name],
        )
        assert result == "worked!"

    def test_writes_with_params(self, database, collection):
        command = """
        function (params) {
            var db = require('@arangodb').db;
            var col = db._collection(params.collection);
            params.names.forEach(function (name) { col.save({name: name}); });
            return col.count();
        }
        """
        result = database.execute_transaction(
            command,
            params={"collection": collection.name, "names": ["Jan", "Piet"]},
            write=[collection.name],
        )
        assert result == 2
        assert collection.count() == 2

    def test_syntax_error(self, database, collection):
        with pytest.raises(TransactionExecuteError) as exc_info:
            database.execute_transaction("function () { error error; }", write=[collection.name])
        assert is_invalid_request(exc_info.value)

    def test_thrown_error_rolls_back(self, database, collection):
        command = f"""
        function () {{
            require('@arangodb').db._collection('{collection.name}').save({{name: 'Jan'}});
            throw 'rollback';
        }}
        """
        with pytest.raises(TransactionExecuteError):
            database.execute_transaction(command, write=[collection.name])
        assert collection.count() == 0
