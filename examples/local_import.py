from __future__ import annotations

import logging
import os
import uuid
from decimal import Decimal

import boto3

from dynamoimport_py import DynamoResultIterator, QueryParameters


def _client():
    return boto3.client(
        "dynamodb",
        endpoint_url=os.environ.get("DYNAMODB_ENDPOINT", "http://localhost:8000"),
        region_name=os.environ.get("AWS_REGION", "us-east-1"),
        aws_access_key_id=os.environ.get("AWS_ACCESS_KEY_ID", "dummy"),
        aws_secret_access_key=os.environ.get("AWS_SECRET_ACCESS_KEY", "dummy"),
    )


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)
    client = _client()
    table_name = f"dynamoimport_example_{uuid.uuid4().hex[:12]}"

    client.create_table(
        TableName=table_name,
        KeySchema=[{"AttributeName": "pk", "KeyType": "HASH"}, {"AttributeName": "sk", "KeyType": "RANGE"}],
        AttributeDefinitions=[
            {"AttributeName": "pk", "AttributeType": "S"},
            {"AttributeName": "sk", "AttributeType": "S"},
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    client.get_waiter("table_exists").wait(TableName=table_name)

    try:
        for i, price in enumerate(["9.99", "19.50", "4.25"]):
            client.put_item(
                TableName=table_name,
                Item={
                    "pk": {"S": "catalog"},
                    "sk": {"S": f"{i:03d}"},
                    "price": {"N": price},
                    "tags": {"SS": ["sale", f"tag-{i}"]},
                },
            )

        params = QueryParameters(
            key_condition_expression="#pk = :pk",
            filter_expression="price > :min",
            name_map={"#pk": "pk"},
            value_map={":pk": "catalog", ":min": Decimal("5")},
        )
        rows = DynamoResultIterator(
            client, table_name, params, {"pk": "s", "sk": "s", "price": "n", "tags": "ss"}
        )
        for row in rows:
            print(row)
    finally:
        client.delete_table(TableName=table_name)


if __name__ == "__main__":
    main()
