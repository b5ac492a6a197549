"""Job-board domain tables read by the authorization layer."""
