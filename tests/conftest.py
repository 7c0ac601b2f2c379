import logfire


logfire.configure(send_to_logfire=False, console=False)
