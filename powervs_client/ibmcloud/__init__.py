"""IBM Cloud collaborators: IAM, resource controller, Power VS, secrets."""
