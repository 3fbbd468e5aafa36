from __future__ import annotations

# Both templates take the same variables:
#   login   organization login
#   first   repositories per page (25 or 100)
#   after   endCursor of the previous page, null for the first page
#   isFork  false to skip forks, null for all repositories
#
# vulnerabilityAlerts is capped at 100 per repository; anything beyond that is
# not visible to the check.

REPOSITORIES_WITH_ALERTS_V1 = """
query repositoriesWithAlerts($login: String!, $first: Int!, $after: String, $isFork: Boolean) {
  organization(login: $login) {
    repositories(first: $first, after: $after, isFork: $isFork) {
      pageInfo {
        endCursor
        hasNextPage
      }
      nodes {
        nameWithOwner
        vulnerabilityAlerts(first: 100) {
          nodes {
            dismissedAt
            securityAdvisory {
              summary
            }
            securityVulnerability {
              firstPatchedVersion {
                identifier
              }
              package {
                name
              }
              vulnerableVersionRange
            }
          }
        }
      }
    }
  }
}
"""

REPOSITORIES_WITH_ALERTS_AND_TOPICS_V1 = """
query repositoriesWithAlertsAndTopics($login: String!, $first: Int!, $after: String, $isFork: Boolean) {
  organization(login: $login) {
    repositories(first: $first, after: $after, isFork: $isFork) {
      pageInfo {
        endCursor
        hasNextPage
      }
      nodes {
        nameWithOwner
        repositoryTopics(first: 10) {
          nodes {
            topic {
              name
            }
          }
        }
        vulnerabilityAlerts(first: 100) {
          nodes {
            dismissedAt
            securityAdvisory {
              summary
            }
            securityVulnerability {
              firstPatchedVersion {
                identifier
              }
              package {
                name
              }
              vulnerableVersionRange
            }
          }
        }
      }
    }
  }
}
"""


def repositories_query(with_topics: bool) -> str:
    return REPOSITORIES_WITH_ALERTS_AND_TOPICS_V1 if with_topics else REPOSITORIES_WITH_ALERTS_V1
