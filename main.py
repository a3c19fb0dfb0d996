from datetime import datetime, timedelta, timezone

from logsource import ResourceRequest, new_client, new_datasource



def main():
    # Example usage: list projects, then run one query against the first
    settings = {"authenticationType": "gce"}

    with new_client(settings) as client:
        ds = new_datasource(client)
        projects = ds.call_resource(ResourceRequest("projects")).json()
        print(f"Projects: {projects}")
        if not projects:
            return

        to = datetime.now(timezone.utc)
        response = ds.query_data([{
            "refId": "A",
            "json": {"projectId": projects[0], "queryText": "severity>=WARNING"},
            "timeRange": {"from": to - timedelta(hours=1), "to": to},
            "maxDataPoints": 20,
        }])
        print(f"Frames: {len(response.responses['A'].frames)}")

if __name__ == "__main__":
    main()
